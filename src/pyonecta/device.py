"""A single cloud device and its current state snapshot."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from pyonecta._path import resolve_datapoint
from pyonecta._redact import mask_sensitive_device_data
from pyonecta.models.device import Datapoint, GatewayDevice, parse_gateway_device

_logger = logging.getLogger(__name__)

DeviceListener = Callable[["OnectaDevice"], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DeviceDescription(BaseModel):
    """Summary projection of a device snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    device_model: str
    management_points: tuple[str, ...] = ()


class OnectaDevice:
    """Holds the latest :class:`GatewayDevice` snapshot of one device.

    The snapshot is only ever replaced as a whole by
    :meth:`update_raw_data`; readers see either the previous or the new
    snapshot, never a mix.
    """

    def __init__(
        self,
        raw_data: Mapping[str, Any] | GatewayDevice,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._clock = clock
        self._snapshot = parse_gateway_device(raw_data)
        self._last_updated = clock()
        self._listeners: list[DeviceListener] = []

    def __repr__(self) -> str:
        return f"OnectaDevice(id={self._snapshot.id!r}, model={self._snapshot.device_model!r})"

    @property
    def desc(self) -> GatewayDevice:
        """The current snapshot."""
        return self._snapshot

    @property
    def last_updated(self) -> datetime:
        return self._last_updated

    def get_id(self) -> str:
        return self._snapshot.id

    def get_description(self) -> DeviceDescription:
        snapshot = self._snapshot
        return DeviceDescription(
            id=snapshot.id,
            device_model=snapshot.device_model or "Unknown",
            management_points=tuple(mp.embedded_id for mp in snapshot.management_points or ()),
        )

    def get_data(
        self,
        management_point_id: str,
        datapoint: str,
        path: str | None = None,
    ) -> Datapoint:
        """Read a datapoint, or a nested leaf of it when *path* is given.

        Parameters
        ----------
        management_point_id
            ``embeddedId`` of the management point (e.g. ``"climateControl"``).
        datapoint
            Datapoint name (e.g. ``"temperatureControl"``).
        path
            Optional slash-delimited path inside the datapoint value (e.g.
            ``"/operationModes/cooling/setpoints/roomTemperature"``).

        Raises
        ------
        OnectaDataNotFoundError
            When any part of the address does not exist.
        OnectaValidationError
            When the addressed leaf has malformed metadata.
        """
        return resolve_datapoint(self._snapshot, management_point_id, datapoint, path)

    def get_value(self, management_point_id: str, datapoint: str, path: str | None = None) -> Any:
        """Shorthand for ``get_data(...).value``."""
        return self.get_data(management_point_id, datapoint, path).value

    def update_raw_data(self, new_data: Mapping[str, Any] | GatewayDevice) -> None:
        """Replace the snapshot with *new_data*.

        The payload is validated before the swap; on
        :class:`~pyonecta.exceptions.OnectaValidationError` the current
        snapshot stays in place.
        """
        snapshot = parse_gateway_device(new_data)
        self._snapshot = snapshot
        self._last_updated = self._clock()
        _logger.debug("Replaced snapshot of device %s", snapshot.id)
        self._notify()

    def masked(self) -> dict[str, Any]:
        """Redacted copy of the raw snapshot, safe to log."""
        return mask_sensitive_device_data(self._snapshot)

    def add_listener(self, listener: DeviceListener) -> Callable[[], None]:
        """Call *listener* after every snapshot replacement.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                _logger.debug("Device listener failed for %s", self._snapshot.id, exc_info=True)
