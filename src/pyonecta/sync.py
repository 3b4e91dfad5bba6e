"""Refresh one device snapshot from the cloud with retries.

A refresh either replaces the device snapshot as a whole or raises; the
previous snapshot stays authoritative on any failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pyonecta._retry import RetryObserver, RetryPolicy, Sleep
from pyonecta.device import OnectaDevice
from pyonecta.models.device import parse_gateway_device

_logger = logging.getLogger(__name__)

FetchDevice = Callable[[], Awaitable[Mapping[str, Any]]]


class DeviceSync:
    """Fetch a device payload through a :class:`RetryPolicy` and swap it in.

    Parameters
    ----------
    fetch
        Coroutine function returning the raw device payload.
    device
        Existing device to update. When ``None`` the first successful
        refresh creates it.
    policy
        Backoff settings; defaults to :class:`RetryPolicy` defaults.
    observer
        Receives retry progress.
    """

    def __init__(
        self,
        fetch: FetchDevice,
        *,
        device: OnectaDevice | None = None,
        policy: RetryPolicy | None = None,
        observer: RetryObserver | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._fetch = fetch
        self._device = device
        self._policy = policy or RetryPolicy()
        self._observer = observer
        self._sleep = sleep

    @property
    def device(self) -> OnectaDevice | None:
        return self._device

    async def refresh(self) -> OnectaDevice:
        """Fetch, validate and replace the snapshot.

        Raises
        ------
        OnectaTransportError
            The last remote error once retries are exhausted (or at once for
            a non-retryable error).
        OnectaValidationError
            The payload does not match the device shape.
        """
        payload = await self._policy.run(self._fetch, observer=self._observer, sleep=self._sleep)
        snapshot = parse_gateway_device(payload)

        if self._device is None:
            self._device = OnectaDevice(snapshot)
            _logger.debug("Discovered device %s", snapshot.id)
        else:
            self._device.update_raw_data(snapshot)
        return self._device
