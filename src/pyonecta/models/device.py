"""Gateway device models.

Mapped from the ``/v1/gateway-devices`` response. A device holds a list of
management points (``climateControl``, ``gateway``,
``domesticHotWaterTank``, ...); every other key of a management point is a
datapoint shaped ``{"value": ..., <metadata>}``. A datapoint value may itself
be an object whose children are ``{"value": ...}`` wrapped, forming a tree
addressed by slash-separated paths (see :mod:`pyonecta._path`).
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pyonecta.exceptions import OnectaValidationError
from pyonecta.models._base import OnectaBaseModel

# Management point keys that are attributes of the point itself.
_MANAGEMENT_POINT_KEYS = frozenset({"embeddedId", "embedded_id", "managementPointType", "management_point_type"})
_MODEL_KEYS = frozenset({"raw", "datapoints"})


class Datapoint(BaseModel):
    """A named reading or setting of a management point.

    Metadata the model does not name (``unit``, ``maxLength``, ...) is kept
    as pydantic extras.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    value: Any = None
    values: list[Any] | None = None
    min_value: float | None = None
    max_value: float | None = None
    step_value: float | None = None
    settable: bool | None = None


class ManagementPoint(OnectaBaseModel):
    """A named sub-component of a device, keyed by ``embedded_id``."""

    embedded_id: str
    management_point_type: str | None = None
    datapoints: dict[str, Datapoint] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_datapoints(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "datapoints" in values:
            return values
        merged = dict(values)
        merged["datapoints"] = {
            key: value
            for key, value in values.items()
            if key not in _MANAGEMENT_POINT_KEYS and key not in _MODEL_KEYS and isinstance(value, Mapping)
        }
        merged.setdefault("raw", values)
        return merged

    def get(self, key: str) -> Datapoint | None:
        return self.datapoints.get(key)


class GatewayDevice(OnectaBaseModel):
    """One device as reported by the cloud.

    Instances are immutable; a refresh produces a new instance that
    replaces the old one as a whole.
    """

    id: str
    device_model: str | None = None
    type: str | None = None
    is_cloud_connection_up: bool | None = None
    management_points: tuple[ManagementPoint, ...] | None = None

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        device_id = value.strip()
        if not device_id:
            raise ValueError("id must be non-empty")
        return device_id

    @field_validator("is_cloud_connection_up", mode="before")
    @classmethod
    def _unwrap_value(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return value.get("value")
        return value

    @model_validator(mode="after")
    def _unique_embedded_ids(self) -> GatewayDevice:
        seen: set[str] = set()
        for management_point in self.management_points or ():
            if management_point.embedded_id in seen:
                raise ValueError(f"duplicate embeddedId {management_point.embedded_id!r} in device {self.id}")
            seen.add(management_point.embedded_id)
        return self

    def management_point(self, embedded_id: str) -> ManagementPoint | None:
        """Return the management point with *embedded_id*, if any."""
        for management_point in self.management_points or ():
            if management_point.embedded_id == embedded_id:
                return management_point
        return None

    def has_management_point_type(self, management_point_type: str) -> bool:
        return any(mp.management_point_type == management_point_type for mp in self.management_points or ())


def parse_gateway_device(payload: Mapping[str, Any] | GatewayDevice) -> GatewayDevice:
    """Validate a raw cloud payload into a :class:`GatewayDevice`.

    Raises
    ------
    OnectaValidationError
        When the payload does not match the device shape.
    """
    if isinstance(payload, GatewayDevice):
        return payload
    if not isinstance(payload, Mapping):
        raise OnectaValidationError(f"Device payload must be an object, got {type(payload).__name__}")
    # The snapshot owns its tree; later edits to *payload* must not leak in.
    try:
        return GatewayDevice.model_validate(copy.deepcopy(dict(payload)))
    except ValidationError as exc:
        device_id = payload.get("id", "<unknown>")
        raise OnectaValidationError(f"Invalid payload for device {device_id}: {exc}") from exc
