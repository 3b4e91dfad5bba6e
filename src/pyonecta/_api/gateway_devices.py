"""Gateway device endpoints."""

from __future__ import annotations

import logging
from typing import Any

from pyonecta._constants import GATEWAY_DEVICES_ENDPOINT
from pyonecta._redact import mask_sensitive_device_data
from pyonecta._transport import Transport
from pyonecta.exceptions import OnectaValidationError
from pyonecta.models.device import GatewayDevice, parse_gateway_device

_logger = logging.getLogger(__name__)


def _device_endpoint(device_id: str) -> str:
    return f"{GATEWAY_DEVICES_ENDPOINT}/{device_id}"


def characteristic_endpoint(device_id: str, embedded_id: str, datapoint: str) -> str:
    return f"{_device_endpoint(device_id)}/management-points/{embedded_id}/characteristics/{datapoint}"


async def fetch_gateway_devices(transport: Transport) -> list[GatewayDevice]:
    """Fetch and validate every device of the account.

    All payloads are validated before anything is returned, so a single
    malformed device fails the whole fetch.
    """
    payload = await transport.request_json("GET", GATEWAY_DEVICES_ENDPOINT)
    if not isinstance(payload, list):
        raise OnectaValidationError(
            f"{GATEWAY_DEVICES_ENDPOINT} returned {type(payload).__name__}, expected a list"
        )
    devices = [parse_gateway_device(item) for item in payload]
    _logger.debug("Fetched %d gateway device(s)", len(devices))
    return devices


async def fetch_gateway_device(transport: Transport, device_id: str) -> dict[str, Any]:
    """Fetch the raw payload of one device."""
    endpoint = _device_endpoint(device_id)
    payload = await transport.request_json("GET", endpoint)
    if not isinstance(payload, dict):
        raise OnectaValidationError(f"{endpoint} returned {type(payload).__name__}, expected an object")
    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug("Device %s payload: %s", device_id, mask_sensitive_device_data(payload))
    return payload


async def patch_characteristic(
    transport: Transport,
    device_id: str,
    embedded_id: str,
    datapoint: str,
    value: Any,
    path: str | None = None,
) -> None:
    """Write *value* to a datapoint, or to the nested *path* inside it."""
    body: dict[str, Any] = {"value": value}
    if path:
        body["path"] = path
    await transport.request_json("PATCH", characteristic_endpoint(device_id, embedded_id, datapoint), body)
