"""Base model for Onecta API payloads.

Every device-level model inherits from :class:`OnectaBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* ``frozen=True`` so a validated snapshot cannot be modified in place.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class OnectaBaseModel(BaseModel):
    """Base for Onecta API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        """Stash the raw payload unless the caller passed ``raw=`` explicitly."""
        if not isinstance(values, dict) or "raw" in values:
            return values
        merged = dict(values)
        merged["raw"] = values
        return merged
