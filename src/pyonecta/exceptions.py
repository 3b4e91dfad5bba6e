"""Custom exception hierarchy for pyonecta."""

from __future__ import annotations

from enum import StrEnum


class FailureReason(StrEnum):
    """Network-level failure kinds detected by the transport."""

    CONNECTION_REFUSED = "connection_refused"
    CONNECTION_TIMEOUT = "connection_timeout"
    HOST_NOT_FOUND = "host_not_found"
    OTHER = "other"


class OnectaError(Exception):
    """Base exception for all pyonecta errors."""


class OnectaConfigError(OnectaError):
    """Invalid or missing configuration."""


class OnectaValidationError(OnectaError):
    """Payload from the cloud does not match the expected device shape."""


class OnectaDataNotFoundError(OnectaError):
    """A management point, datapoint or path segment does not exist.

    Raised synchronously by :meth:`pyonecta.device.OnectaDevice.get_data`.
    It is never retried.
    """

    def __init__(
        self,
        message: str,
        *,
        management_point_id: str = "",
        datapoint: str = "",
        path: str | None = None,
    ) -> None:
        self.management_point_id = management_point_id
        self.datapoint = datapoint
        self.path = path
        super().__init__(message)


class OnectaTransportError(OnectaError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        reason: FailureReason | None = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(message)


class OnectaTransientError(OnectaTransportError):
    """Remote failure that is worth retrying (timeouts, gateway errors)."""


class OnectaRateLimitError(OnectaTransientError):
    """Rate limited by the cloud (HTTP 429).

    ``retry_after`` holds the number of seconds the server asked us to
    wait, or the library default when the header was missing.
    """

    def __init__(
        self,
        message: str,
        *,
        retry_after: float,
        endpoint: str = "",
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, status_code=429, endpoint=endpoint)


class OnectaPermanentError(OnectaTransportError):
    """Remote failure that will not go away by retrying (most 4xx, 500)."""
