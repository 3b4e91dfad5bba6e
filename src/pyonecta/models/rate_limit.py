"""Rate limit status reported in Onecta response headers."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from pyonecta._normalize import safe_int

_HEADER_FIELDS: dict[str, str] = {
    "x-ratelimit-limit-minute": "limit_minute",
    "x-ratelimit-remaining-minute": "remaining_minute",
    "x-ratelimit-limit-day": "limit_day",
    "x-ratelimit-remaining-day": "remaining_day",
}


class RateLimitStatus(BaseModel):
    """Per-minute and per-day request budget."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit_minute: int | None = None
    remaining_minute: int | None = None
    limit_day: int | None = None
    remaining_day: int | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateLimitStatus:
        """Parse the ``x-ratelimit-*`` headers; missing or garbled ones are ``None``."""
        lowered = {str(k).lower(): v for k, v in headers.items()}
        return cls(**{field: safe_int(lowered.get(header)) for header, field in _HEADER_FIELDS.items()})

    @property
    def is_known(self) -> bool:
        return any(value is not None for value in self.model_dump().values())
