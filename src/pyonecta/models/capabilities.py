"""Capability flag models.

A :class:`DeviceCapabilities` is derived from a device snapshot by
:func:`pyonecta.capabilities.detect_capabilities`; callers may also build
one directly (camelCase keys such as ``hasPowerfulMode`` are accepted).
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OperationMode(StrEnum):
    FAN_ONLY = "fanOnly"
    HEATING = "heating"
    COOLING = "cooling"
    AUTO = "auto"
    DRY = "dry"


class FanSpeedMode(StrEnum):
    AUTO = "auto"
    QUIET = "quiet"
    FIXED = "fixed"


class ManagementPointType(StrEnum):
    CLIMATE_CONTROL = "climateControl"
    DOMESTIC_HOT_WATER_TANK = "domesticHotWaterTank"
    GATEWAY = "gateway"


_CAPABILITY_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    populate_by_name=True,
    alias_generator=to_camel,
)


class DeviceCapabilities(BaseModel):
    """Optional features supported by one management point of a device."""

    model_config = _CAPABILITY_CONFIG

    # Management points
    has_climate_control: bool = False
    has_domestic_hot_water_tank: bool = False
    has_gateway: bool = False

    # Climate control features
    has_powerful_mode: bool = False
    has_econo_mode: bool = False
    has_streamer_mode: bool = False
    has_outdoor_silent_mode: bool = False
    has_indoor_silent_mode: bool = False
    has_swing_mode_vertical: bool = False
    has_swing_mode_horizontal: bool = False
    has_fan_control: bool = False

    # Operation modes
    supported_operation_modes: tuple[str, ...] = ()
    has_dry_operation_mode: bool = False
    has_fan_only_operation_mode: bool = False

    # Temperature control
    has_heating_mode: bool = False
    has_cooling_mode: bool = False
    has_auto_mode: bool = False

    # Altherma-specific
    has_control_mode: bool = False
    has_setpoint_mode: bool = False


class TemperatureConstraints(BaseModel):
    """Setpoint range for one operation mode."""

    model_config = _CAPABILITY_CONFIG

    min_value: float
    max_value: float
    step_value: float


class DeviceTemperatureCapabilities(BaseModel):
    model_config = _CAPABILITY_CONFIG

    cooling: TemperatureConstraints | None = None
    heating: TemperatureConstraints | None = None
    auto: TemperatureConstraints | None = None
    domestic_hot_water: TemperatureConstraints | None = None
