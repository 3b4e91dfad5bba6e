"""Capability detection and summaries.

:func:`detect_capabilities` reads a device snapshot through
:meth:`OnectaDevice.get_data` and treats a missing datapoint as an absent
feature. :func:`summarize_capabilities` turns the flags into a short token
list for log lines.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from pyonecta.device import OnectaDevice
from pyonecta.exceptions import OnectaDataNotFoundError, OnectaValidationError
from pyonecta.models.capabilities import (
    DeviceCapabilities,
    DeviceTemperatureCapabilities,
    FanSpeedMode,
    ManagementPointType,
    OperationMode,
    TemperatureConstraints,
)
from pyonecta.models.device import Datapoint

# Ordered: tokens appear in this order in the summary.
_SUMMARY_CHECKS: tuple[tuple[str, Callable[[DeviceCapabilities], bool]], ...] = (
    ("powerful", lambda c: c.has_powerful_mode),
    ("econo", lambda c: c.has_econo_mode),
    ("streamer", lambda c: c.has_streamer_mode),
    ("outdoor-silent", lambda c: c.has_outdoor_silent_mode),
    ("indoor-silent", lambda c: c.has_indoor_silent_mode),
    ("fan-speed", lambda c: c.has_fan_control),
    ("swing", lambda c: c.has_swing_mode_vertical or c.has_swing_mode_horizontal),
    ("dry-mode", lambda c: c.has_dry_operation_mode),
    ("fan-only", lambda c: c.has_fan_only_operation_mode),
)


def _optional(device: OnectaDevice, management_point_id: str, datapoint: str, path: str | None = None) -> Datapoint | None:
    try:
        return device.get_data(management_point_id, datapoint, path)
    except OnectaDataNotFoundError:
        return None


def _current_operation_mode(device: OnectaDevice, management_point_id: str) -> str:
    data = _optional(device, management_point_id, "operationMode")
    if data is None or not data.value:
        return OperationMode.AUTO.value
    return str(data.value)


def _constraints(data: Datapoint | None) -> TemperatureConstraints | None:
    if data is None or data.min_value is None or data.max_value is None or data.step_value is None:
        return None
    return TemperatureConstraints(min_value=data.min_value, max_value=data.max_value, step_value=data.step_value)


def detect_capabilities(device: OnectaDevice, management_point_id: str) -> DeviceCapabilities:
    """Derive the capability flags of one management point."""
    operation_mode_data = _optional(device, management_point_id, "operationMode")
    supported_modes = tuple(str(mode) for mode in (operation_mode_data.values or ())) if operation_mode_data else ()
    mode = _current_operation_mode(device, management_point_id)

    def has_feature(feature: str) -> bool:
        return _optional(device, management_point_id, feature) is not None

    def has_fan_path(path: str) -> bool:
        return _optional(device, management_point_id, "fanControl", f"/operationModes/{mode}/{path}") is not None

    fan_speed = _optional(device, management_point_id, "fanControl", f"/operationModes/{mode}/fanSpeed/currentMode")
    fan_speed_modes = (fan_speed.values or []) if fan_speed is not None else []

    snapshot = device.desc
    return DeviceCapabilities(
        has_climate_control=snapshot.has_management_point_type(ManagementPointType.CLIMATE_CONTROL),
        has_domestic_hot_water_tank=snapshot.has_management_point_type(ManagementPointType.DOMESTIC_HOT_WATER_TANK),
        has_gateway=snapshot.has_management_point_type(ManagementPointType.GATEWAY),
        has_powerful_mode=has_feature("powerfulMode"),
        has_econo_mode=has_feature("econoMode"),
        has_streamer_mode=has_feature("streamerMode"),
        has_outdoor_silent_mode=has_feature("outdoorSilentMode"),
        has_indoor_silent_mode=FanSpeedMode.QUIET.value in fan_speed_modes,
        has_swing_mode_vertical=has_fan_path("fanDirection/vertical/currentMode"),
        has_swing_mode_horizontal=has_fan_path("fanDirection/horizontal/currentMode"),
        has_fan_control=has_fan_path("fanSpeed/modes/fixed"),
        supported_operation_modes=supported_modes,
        has_dry_operation_mode=OperationMode.DRY.value in supported_modes,
        has_fan_only_operation_mode=OperationMode.FAN_ONLY.value in supported_modes,
        has_heating_mode=OperationMode.HEATING.value in supported_modes,
        has_cooling_mode=OperationMode.COOLING.value in supported_modes,
        has_auto_mode=OperationMode.AUTO.value in supported_modes,
        has_control_mode=has_feature("controlMode"),
        has_setpoint_mode=has_feature("setpointMode"),
    )


def detect_temperature_capabilities(device: OnectaDevice, management_point_id: str) -> DeviceTemperatureCapabilities:
    """Read the room temperature setpoint ranges per operation mode."""
    ranges: dict[str, TemperatureConstraints | None] = {}
    for mode in (OperationMode.COOLING, OperationMode.HEATING, OperationMode.AUTO):
        data = _optional(
            device,
            management_point_id,
            "temperatureControl",
            f"/operationModes/{mode.value}/setpoints/roomTemperature",
        )
        ranges[mode.value] = _constraints(data)

    hot_water = _optional(
        device,
        management_point_id,
        "temperatureControl",
        "/operationModes/heating/setpoints/domesticHotWaterTemperature",
    )
    return DeviceTemperatureCapabilities(
        cooling=ranges["cooling"],
        heating=ranges["heating"],
        auto=ranges["auto"],
        domestic_hot_water=_constraints(hot_water),
    )


def summarize_capabilities(flags: DeviceCapabilities | Mapping[str, Any]) -> str:
    """Return e.g. ``"powerful, fan-speed"``, or ``"basic"`` when nothing is set.

    *flags* may be a :class:`DeviceCapabilities` or a mapping keyed by
    camelCase (``hasPowerfulMode``) or snake_case names. ``None`` values
    count as unset.

    Raises
    ------
    OnectaValidationError
        When a flag value cannot be read as a boolean.
    """
    if isinstance(flags, DeviceCapabilities):
        capabilities = flags
    else:
        try:
            capabilities = DeviceCapabilities.model_validate({k: v for k, v in flags.items() if v is not None})
        except ValidationError as exc:
            raise OnectaValidationError(f"Invalid capability flags: {exc}") from exc
    features = [token for token, check in _SUMMARY_CHECKS if check(capabilities)]
    return ", ".join(features) if features else "basic"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def format_capabilities(capabilities: DeviceCapabilities) -> list[str]:
    """Human-readable capability lines for debug logging."""
    lines = [
        "Management Points:",
        f"  - Climate Control: {_yes_no(capabilities.has_climate_control)}",
        f"  - Domestic Hot Water Tank: {_yes_no(capabilities.has_domestic_hot_water_tank)}",
        f"  - Gateway: {_yes_no(capabilities.has_gateway)}",
    ]

    if capabilities.supported_operation_modes:
        lines += [
            "Operation Modes:",
            f"  - Supported: {', '.join(capabilities.supported_operation_modes)}",
            f"  - Heating: {_yes_no(capabilities.has_heating_mode)}",
            f"  - Cooling: {_yes_no(capabilities.has_cooling_mode)}",
            f"  - Auto: {_yes_no(capabilities.has_auto_mode)}",
            f"  - Dry: {_yes_no(capabilities.has_dry_operation_mode)}",
            f"  - Fan Only: {_yes_no(capabilities.has_fan_only_operation_mode)}",
        ]

    lines += [
        "Climate Features:",
        f"  - Powerful Mode: {_yes_no(capabilities.has_powerful_mode)}",
        f"  - Econo Mode: {_yes_no(capabilities.has_econo_mode)}",
        f"  - Streamer Mode: {_yes_no(capabilities.has_streamer_mode)}",
        f"  - Outdoor Silent Mode: {_yes_no(capabilities.has_outdoor_silent_mode)}",
        f"  - Indoor Silent Mode: {_yes_no(capabilities.has_indoor_silent_mode)}",
        "Fan Control:",
        f"  - Fan Speed Control: {_yes_no(capabilities.has_fan_control)}",
        f"  - Vertical Swing: {_yes_no(capabilities.has_swing_mode_vertical)}",
        f"  - Horizontal Swing: {_yes_no(capabilities.has_swing_mode_horizontal)}",
    ]

    if capabilities.has_control_mode or capabilities.has_setpoint_mode:
        lines += [
            "Altherma Features:",
            f"  - Control Mode: {_yes_no(capabilities.has_control_mode)}",
            f"  - Setpoint Mode: {_yes_no(capabilities.has_setpoint_mode)}",
        ]
    return lines


def format_temperature_capabilities(capabilities: DeviceTemperatureCapabilities) -> list[str]:
    lines = ["Temperature Ranges:"]
    for label, constraints in (
        ("Cooling", capabilities.cooling),
        ("Heating", capabilities.heating),
        ("Auto", capabilities.auto),
        ("Hot Water", capabilities.domestic_hot_water),
    ):
        if constraints is not None:
            lines.append(
                f"  - {label}: {constraints.min_value}°C - {constraints.max_value}°C (step: {constraints.step_value}°C)"
            )
    return lines
