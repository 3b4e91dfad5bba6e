"""HTTP transport with status mapping and rate-limit tracking."""

from __future__ import annotations

import json
import logging
import socket
import time
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import aiohttp

from pyonecta._constants import (
    DEFAULT_RETRY_AFTER_SECONDS,
    MAX_RATE_LIMIT_BLOCK_SECONDS,
    RETRYABLE_STATUS_CODES,
    USER_AGENT,
)
from pyonecta._normalize import safe_float
from pyonecta._redact import redact_for_log
from pyonecta.config import OnectaConfig
from pyonecta.exceptions import (
    FailureReason,
    OnectaPermanentError,
    OnectaRateLimitError,
    OnectaTransientError,
    OnectaTransportError,
)
from pyonecta.models.rate_limit import RateLimitStatus

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        ...


def failure_reason(error: BaseException | None) -> FailureReason:
    """Map a low-level connection error to a :class:`FailureReason`."""
    if isinstance(error, aiohttp.ClientConnectorError):
        return failure_reason(error.os_error)
    if isinstance(error, socket.gaierror):
        return FailureReason.HOST_NOT_FOUND
    if isinstance(error, ConnectionRefusedError):
        return FailureReason.CONNECTION_REFUSED
    if isinstance(error, TimeoutError):
        return FailureReason.CONNECTION_TIMEOUT
    return FailureReason.OTHER


def error_for_status(
    status: int,
    endpoint: str,
    text: str,
    headers: Mapping[str, str],
) -> OnectaTransportError:
    """Build the exception for a non-2xx response."""
    if status == 429:
        retry_after = safe_float(headers.get("retry-after")) or DEFAULT_RETRY_AFTER_SECONDS
        return OnectaRateLimitError(
            f"Rate limited by {endpoint}. Retry after {retry_after:.0f} seconds.",
            retry_after=min(retry_after, MAX_RATE_LIMIT_BLOCK_SECONDS),
            endpoint=endpoint,
        )
    message = f"HTTP {status} from {endpoint}: {text[:200] or 'No response body'}"
    if status in RETRYABLE_STATUS_CODES:
        return OnectaTransientError(message, status_code=status, endpoint=endpoint)
    return OnectaPermanentError(message, status_code=status, endpoint=endpoint)


class HttpTransport:
    """JSON-over-HTTPS transport for the Onecta REST API."""

    def __init__(
        self,
        config: OnectaConfig,
        http_session: aiohttp.ClientSession,
        *,
        on_rate_limit_status: Callable[[RateLimitStatus], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._http = http_session
        self._on_rate_limit_status = on_rate_limit_status
        self._clock = clock
        self._blocked_until = 0.0
        self.rate_limit = RateLimitStatus()

    @property
    def is_rate_limited(self) -> bool:
        return self._blocked_until > self._clock()

    @property
    def rate_limit_retry_after(self) -> float:
        """Seconds until requests are allowed again (``0`` when not blocked)."""
        return max(0.0, self._blocked_until - self._clock())

    def _build_headers(self, has_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if has_body:
            headers["content-type"] = "application/json"
        if self._config.access_token:
            headers["authorization"] = f"Bearer {self._config.access_token}"
        return headers

    def _record_rate_limit(self, headers: Mapping[str, str]) -> None:
        status = RateLimitStatus.from_headers(headers)
        if not status.is_known:
            return
        self.rate_limit = status
        if self._on_rate_limit_status is not None:
            try:
                self._on_rate_limit_status(status)
            except Exception:
                _logger.debug("on_rate_limit_status callback failed", exc_info=True)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (``None`` when empty).

        Raises
        ------
        OnectaRateLimitError
            HTTP 429, or a request attempted while a previous 429 block
            is still active.
        OnectaTransientError
            Connection refused/timeout, host not found, 408/502/503/504.
        OnectaPermanentError
            Any other failure.
        """
        if self.is_rate_limited:
            retry_after = self.rate_limit_retry_after
            raise OnectaRateLimitError(
                f"Request to {endpoint} blocked due to rate limit. Retry after {retry_after:.0f} seconds.",
                retry_after=retry_after,
                endpoint=endpoint,
            )

        url = f"{self._config.base_url}{endpoint}"
        headers = self._build_headers(body is not None)
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("%s %s body=%s", method, url, redact_for_log(body))

        try:
            async with self._http.request(
                method,
                url,
                json=dict(body) if body is not None else None,
                headers=headers,
                timeout=timeout,
            ) as resp:
                self._record_rate_limit(resp.headers)
                text = await resp.text()
                if resp.status >= 400:
                    error = error_for_status(resp.status, endpoint, text, resp.headers)
                    if isinstance(error, OnectaRateLimitError):
                        self._blocked_until = self._clock() + error.retry_after
                    raise error
        except OnectaTransportError:
            raise
        except (aiohttp.ClientConnectorError, TimeoutError) as exc:
            reason = failure_reason(exc)
            error_cls = OnectaPermanentError if reason is FailureReason.OTHER else OnectaTransientError
            raise error_cls(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
                reason=reason,
            ) from exc
        except aiohttp.ClientError as exc:
            raise OnectaPermanentError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
                reason=FailureReason.OTHER,
            ) from exc

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise OnectaPermanentError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=resp.status,
                endpoint=endpoint,
            ) from exc
