"""Data models for Onecta API responses."""

from pyonecta.models._base import OnectaBaseModel
from pyonecta.models.capabilities import (
    DeviceCapabilities,
    DeviceTemperatureCapabilities,
    FanSpeedMode,
    ManagementPointType,
    OperationMode,
    TemperatureConstraints,
)
from pyonecta.models.device import Datapoint, GatewayDevice, ManagementPoint
from pyonecta.models.rate_limit import RateLimitStatus

__all__ = [
    "Datapoint",
    "DeviceCapabilities",
    "DeviceTemperatureCapabilities",
    "FanSpeedMode",
    "GatewayDevice",
    "ManagementPoint",
    "ManagementPointType",
    "OnectaBaseModel",
    "OperationMode",
    "RateLimitStatus",
    "TemperatureConstraints",
]
