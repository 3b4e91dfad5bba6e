"""High-level async client for the Daikin Onecta cloud API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp

from pyonecta._api import gateway_devices as _devices_api
from pyonecta._retry import LoggingRetryObserver, RetryObserver, RetryPolicy
from pyonecta._transport import HttpTransport
from pyonecta.config import OnectaConfig
from pyonecta.device import OnectaDevice
from pyonecta.exceptions import OnectaError
from pyonecta.models.rate_limit import RateLimitStatus
from pyonecta.sync import DeviceSync

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class OnectaClient:
    """Async client for the Onecta gateway device API.

    Usage::

        async with OnectaClient(config) as client:
            devices = await client.get_devices()
            mode = devices[0].get_value("climateControl", "operationMode")
    """

    def __init__(
        self,
        config: OnectaConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        retry_observer: RetryObserver | None = None,
        on_rate_limit_status: Callable[[RateLimitStatus], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        self._policy = RetryPolicy.from_config(config)
        self._observer = retry_observer or LoggingRetryObserver("Onecta", _logger)
        self._on_rate_limit_status = on_rate_limit_status
        self._devices: dict[str, OnectaDevice] = {}

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> OnectaClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(
            self._config,
            self._http_session,
            on_rate_limit_status=self._on_rate_limit_status,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise OnectaError("Client not initialized. Use 'async with OnectaClient(...) as client:'")
        return self._transport

    async def _with_retry(self, fn: Callable[[], Awaitable[T]]) -> T:
        return await self._policy.run(fn, observer=self._observer)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def devices(self) -> list[OnectaDevice]:
        """Devices known from the last successful fetch."""
        return list(self._devices.values())

    def get_device(self, device_id: str) -> OnectaDevice | None:
        return self._devices.get(device_id)

    @property
    def rate_limit(self) -> RateLimitStatus:
        """Most recent rate limit headers (empty before the first request)."""
        if self._transport is None:
            return RateLimitStatus()
        return self._transport.rate_limit

    def is_rate_limited(self) -> bool:
        return self._transport is not None and self._transport.is_rate_limited

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def get_devices(self) -> list[OnectaDevice]:
        """Fetch all devices and replace their snapshots.

        Devices already known keep their :class:`OnectaDevice` identity and
        get the new snapshot through ``update_raw_data``. Devices missing
        from the response are dropped.
        """
        transport = self._require_transport()
        snapshots = await self._with_retry(lambda: _devices_api.fetch_gateway_devices(transport))

        devices: dict[str, OnectaDevice] = {}
        for snapshot in snapshots:
            existing = self._devices.get(snapshot.id)
            if existing is not None:
                existing.update_raw_data(snapshot)
                devices[snapshot.id] = existing
            else:
                devices[snapshot.id] = OnectaDevice(snapshot)
        self._devices = devices
        return list(devices.values())

    async def update_all_device_data(self) -> None:
        """Refresh every device (polling entry point)."""
        await self.get_devices()

    async def refresh_device(self, device_id: str) -> OnectaDevice:
        """Fetch a single device and replace its snapshot."""
        transport = self._require_transport()

        async def _fetch() -> dict[str, Any]:
            return await _devices_api.fetch_gateway_device(transport, device_id)

        sync = DeviceSync(
            _fetch,
            device=self._devices.get(device_id),
            policy=self._policy,
            observer=self._observer,
        )
        device = await sync.refresh()
        if device.get_id() != device_id:
            self._devices.pop(device_id, None)
        self._devices[device.get_id()] = device
        return device

    # ------------------------------------------------------------------
    # Write endpoints
    # ------------------------------------------------------------------

    async def set_data(
        self,
        device_id: str,
        management_point_id: str,
        datapoint: str,
        value: Any,
        path: str | None = None,
    ) -> None:
        """Write a datapoint value on the cloud.

        The local snapshot is not patched; call :meth:`refresh_device` (or
        wait for the next poll) to observe the change.
        """
        transport = self._require_transport()

        async def _call() -> None:
            await _devices_api.patch_characteristic(
                transport,
                device_id,
                management_point_id,
                datapoint,
                value,
                path,
            )

        await self._with_retry(_call)
        _logger.debug("Set %s/%s%s on device %s", management_point_id, datapoint, path or "", device_id)
