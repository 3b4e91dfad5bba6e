"""pyonecta - Async Python client for the Daikin Onecta cloud API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyonecta")
except PackageNotFoundError:
    __version__ = "0+local"
from pyonecta._redact import mask_sensitive_device_data, redact_for_log
from pyonecta._retry import (
    LoggingRetryObserver,
    RetryObserver,
    RetryPolicy,
    classify_retryable,
    execute_with_backoff,
)
from pyonecta.capabilities import (
    detect_capabilities,
    detect_temperature_capabilities,
    format_capabilities,
    format_temperature_capabilities,
    summarize_capabilities,
)
from pyonecta.client import OnectaClient
from pyonecta.config import OnectaConfig
from pyonecta.device import DeviceDescription, OnectaDevice
from pyonecta.exceptions import (
    FailureReason,
    OnectaConfigError,
    OnectaDataNotFoundError,
    OnectaError,
    OnectaPermanentError,
    OnectaRateLimitError,
    OnectaTransientError,
    OnectaTransportError,
    OnectaValidationError,
)
from pyonecta.models import (
    Datapoint,
    DeviceCapabilities,
    DeviceTemperatureCapabilities,
    GatewayDevice,
    ManagementPoint,
    RateLimitStatus,
    TemperatureConstraints,
)
from pyonecta.sync import DeviceSync

__all__ = [
    "__version__",
    "Datapoint",
    "DeviceCapabilities",
    "DeviceDescription",
    "DeviceSync",
    "DeviceTemperatureCapabilities",
    "FailureReason",
    "GatewayDevice",
    "LoggingRetryObserver",
    "ManagementPoint",
    "OnectaClient",
    "OnectaConfig",
    "OnectaConfigError",
    "OnectaDataNotFoundError",
    "OnectaDevice",
    "OnectaError",
    "OnectaPermanentError",
    "OnectaRateLimitError",
    "OnectaTransientError",
    "OnectaTransportError",
    "OnectaValidationError",
    "RateLimitStatus",
    "RetryObserver",
    "RetryPolicy",
    "TemperatureConstraints",
    "classify_retryable",
    "detect_capabilities",
    "detect_temperature_capabilities",
    "execute_with_backoff",
    "format_capabilities",
    "format_temperature_capabilities",
    "mask_sensitive_device_data",
    "redact_for_log",
    "summarize_capabilities",
]
