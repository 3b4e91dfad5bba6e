"""Exponential backoff for remote calls.

:func:`execute_with_backoff` retries an async operation with a capped,
doubling delay. It retries on every failure unless a ``retry_if``
predicate is supplied; :func:`classify_retryable` is the predicate the
client uses to retry only transient failures.

Progress is reported to an injected :class:`RetryObserver` instead of a
bare callback.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import socket
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import aiohttp

from pyonecta._constants import (
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    RETRYABLE_STATUS_CODES,
)
from pyonecta.exceptions import FailureReason

if TYPE_CHECKING:
    from pyonecta.config import OnectaConfig

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

_RETRYABLE_REASONS: frozenset[FailureReason] = frozenset(
    {
        FailureReason.CONNECTION_REFUSED,
        FailureReason.CONNECTION_TIMEOUT,
        FailureReason.HOST_NOT_FOUND,
    }
)

# TimeoutError also covers asyncio/aiohttp timeouts.
_RETRYABLE_NETWORK_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionRefusedError,
    TimeoutError,
    socket.gaierror,
)


class RetryObserver:
    """Receives retry progress from :func:`execute_with_backoff`.

    Subclasses override the hooks they care about; the defaults do nothing.
    Hooks run synchronously inside the retry loop and must not block.
    """

    def on_retry(self, attempt: int, error: BaseException, delay: float) -> None:
        """Called after a failed attempt, before sleeping *delay* seconds.

        *attempt* is the one-based number of the retry about to happen.
        """

    def on_give_up(self, attempts: int, error: BaseException) -> None:
        """Called once before the final *error* is re-raised."""


class LoggingRetryObserver(RetryObserver):
    """Log retries as warnings and the final failure as an error."""

    def __init__(self, label: str = "", logger: logging.Logger | None = None) -> None:
        self._label = label
        self._log = logger or _logger

    def on_retry(self, attempt: int, error: BaseException, delay: float) -> None:
        prefix = f"[{self._label}] " if self._label else ""
        self._log.warning("%sRetry attempt %d in %.1fs: %s", prefix, attempt, delay, error)

    def on_give_up(self, attempts: int, error: BaseException) -> None:
        prefix = f"[{self._label}] " if self._label else ""
        self._log.error("%sGiving up after %d attempt(s): %s", prefix, attempts, error)


def backoff_delay(attempt: int, *, initial_delay: float, max_delay: float) -> float:
    """Delay in seconds after the zero-based *attempt* failed."""
    return min(initial_delay * (2**attempt), max_delay)


def retry_after(error: BaseException) -> float | None:
    """Server-requested wait carried by *error* (e.g. a 429), in seconds."""
    value = getattr(error, "retry_after", None)
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return None


def classify_retryable(error: BaseException) -> bool:
    """Return ``True`` when *error* is a transient remote failure.

    Transient means connection refused, connection timeout, host not found,
    or an HTTP status of 408, 429, 502, 503 or 504.
    """
    reason = getattr(error, "reason", None)
    if isinstance(reason, FailureReason) and reason in _RETRYABLE_REASONS:
        return True

    if isinstance(error, _RETRYABLE_NETWORK_ERRORS):
        return True

    if isinstance(error, aiohttp.ClientConnectorError) and isinstance(error.os_error, _RETRYABLE_NETWORK_ERRORS):
        return True

    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status in RETRYABLE_STATUS_CODES

    return False


async def execute_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    observer: RetryObserver | None = None,
    retry_if: Callable[[BaseException], bool] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run *operation* up to ``max_retries + 1`` times.

    Parameters
    ----------
    operation
        Zero-argument coroutine function, called once per attempt.
    max_retries
        Retries allowed after the first attempt.
    initial_delay, max_delay
        The delay after zero-based attempt ``n`` is
        ``min(initial_delay * 2**n, max_delay)`` seconds. An error carrying
        ``retry_after`` stretches that delay to the requested wait, still
        capped at *max_delay*.
    observer
        Receives ``on_retry`` before every sleep and ``on_give_up`` before
        the final error is raised.
    retry_if
        Optional predicate. When it returns ``False`` the error is raised
        at once. ``None`` retries every failure.
    sleep
        Awaitable sleep, injectable for tests.

    Returns
    -------
    T
        The first successful result.

    Raises
    ------
    Exception
        The last error, re-raised unmodified.
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")

    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as exc:
            if attempt >= max_retries or (retry_if is not None and not retry_if(exc)):
                if observer is not None:
                    observer.on_give_up(attempt + 1, exc)
                raise

            delay = backoff_delay(attempt, initial_delay=initial_delay, max_delay=max_delay)
            requested = retry_after(exc)
            if requested is not None:
                delay = min(max(delay, requested), max_delay)
            _logger.debug("Attempt %d failed (%s); retrying in %.2fs", attempt + 1, exc, delay)
            if observer is not None:
                observer.on_retry(attempt + 1, exc, delay)
            await sleep(delay)
            attempt += 1


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Backoff settings shared by the sync client and :class:`OnectaClient`."""

    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = DEFAULT_INITIAL_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    retry_transient_only: bool = True

    @classmethod
    def from_config(cls, config: OnectaConfig) -> RetryPolicy:
        return cls(
            max_retries=config.max_retries,
            initial_delay=config.retry_initial_delay,
            max_delay=config.retry_max_delay,
            retry_transient_only=config.retry_transient_only,
        )

    def should_retry(self, error: BaseException) -> bool:
        """Retry predicate used by :meth:`run`.

        Gives up at once when the server asks for a longer wait than a
        single backoff step may take.
        """
        requested = retry_after(error)
        if requested is not None and requested > self.max_delay:
            return False
        return classify_retryable(error) if self.retry_transient_only else True

    def delay_for(self, attempt: int) -> float:
        return backoff_delay(attempt, initial_delay=self.initial_delay, max_delay=self.max_delay)

    @property
    def worst_case_delay(self) -> float:
        """Sum of all backoff delays when every attempt fails."""
        return sum(self.delay_for(attempt) for attempt in range(self.max_retries))

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        observer: RetryObserver | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> T:
        return await execute_with_backoff(
            operation,
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            observer=observer,
            retry_if=self.should_retry,
            sleep=sleep,
        )
