"""End-to-end client tests against a fake Onecta backend.

``HttpTransport.request_json`` is patched so the full client, retry and
snapshot pipeline runs without network access.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from pyonecta import OnectaClient, OnectaConfig
from pyonecta.exceptions import OnectaError, OnectaPermanentError, OnectaTransientError


class _FakeBackend:
    def __init__(self, devices: list[dict[str, Any]]) -> None:
        self.devices = {device["id"]: device for device in devices}
        self.requests: list[tuple[str, str, Any]] = []
        self.failures: list[Exception] = []

    async def request_json(self, method: str, endpoint: str, body: Any = None) -> Any:
        self.requests.append((method, endpoint, copy.deepcopy(body)))
        if self.failures:
            raise self.failures.pop(0)

        parts = endpoint.strip("/").split("/")
        if method == "GET" and parts == ["v1", "gateway-devices"]:
            return copy.deepcopy(list(self.devices.values()))
        if method == "GET" and parts[:2] == ["v1", "gateway-devices"] and len(parts) == 3:
            device = self.devices.get(parts[2])
            if device is None:
                raise OnectaPermanentError(f"HTTP 404 from {endpoint}", status_code=404, endpoint=endpoint)
            return copy.deepcopy(device)
        if method == "PATCH":
            return None
        raise AssertionError(f"unexpected request {method} {endpoint}")


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch, device_payload: dict[str, Any]) -> _FakeBackend:
    fake = _FakeBackend([device_payload])

    async def _request_json(self: Any, method: str, endpoint: str, body: Any = None) -> Any:
        return await fake.request_json(method, endpoint, body)

    monkeypatch.setattr("pyonecta._transport.HttpTransport.request_json", _request_json)
    return fake


def _config() -> OnectaConfig:
    return OnectaConfig(access_token="token", retry_initial_delay=0.0, retry_max_delay=0.0)


@pytest.mark.asyncio
async def test_get_devices(backend: _FakeBackend, device_payload: dict[str, Any]) -> None:
    async with OnectaClient(_config()) as client:
        devices = await client.get_devices()

    assert len(devices) == 1
    assert devices[0].get_id() == device_payload["id"]
    assert devices[0].get_value("climateControl", "operationMode") == "cooling"
    assert backend.requests == [("GET", "/v1/gateway-devices", None)]


@pytest.mark.asyncio
async def test_get_devices_keeps_device_identity(backend: _FakeBackend, device_payload: dict[str, Any]) -> None:
    async with OnectaClient(_config()) as client:
        (first,) = await client.get_devices()
        old_snapshot = first.desc

        backend.devices[device_payload["id"]]["managementPoints"][1]["onOffMode"]["value"] = "off"
        await client.update_all_device_data()

        assert client.devices == [first]
        assert first.desc is not old_snapshot
        assert first.get_value("climateControl", "onOffMode") == "off"


@pytest.mark.asyncio
async def test_transient_error_is_retried(backend: _FakeBackend) -> None:
    backend.failures.append(OnectaTransientError("HTTP 503", status_code=503))

    async with OnectaClient(_config()) as client:
        devices = await client.get_devices()

    assert len(devices) == 1
    assert len(backend.requests) == 2


@pytest.mark.asyncio
async def test_permanent_error_is_raised_at_once(backend: _FakeBackend) -> None:
    backend.failures.append(OnectaPermanentError("HTTP 401", status_code=401))

    async with OnectaClient(_config()) as client:
        with pytest.raises(OnectaPermanentError):
            await client.get_devices()

    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_refresh_device(backend: _FakeBackend, device_payload: dict[str, Any]) -> None:
    device_id = device_payload["id"]

    async with OnectaClient(_config()) as client:
        device = await client.refresh_device(device_id)
        assert client.get_device(device_id) is device

        backend.devices[device_id]["managementPoints"][1]["econoMode"]["value"] = "on"
        again = await client.refresh_device(device_id)

    assert again is device
    assert device.get_value("climateControl", "econoMode") == "on"
    assert backend.requests[-1] == ("GET", f"/v1/gateway-devices/{device_id}", None)


@pytest.mark.asyncio
async def test_failed_refresh_keeps_snapshot(backend: _FakeBackend, device_payload: dict[str, Any]) -> None:
    device_id = device_payload["id"]

    async with OnectaClient(_config()) as client:
        device = await client.refresh_device(device_id)
        snapshot = device.desc
        backend.failures.extend(OnectaTransientError("HTTP 502", status_code=502) for _ in range(4))

        with pytest.raises(OnectaTransientError):
            await client.refresh_device(device_id)

    assert device.desc is snapshot


@pytest.mark.asyncio
async def test_set_data_patches_characteristic(backend: _FakeBackend, device_payload: dict[str, Any]) -> None:
    device_id = device_payload["id"]

    async with OnectaClient(_config()) as client:
        await client.set_data(
            device_id,
            "climateControl",
            "temperatureControl",
            23.5,
            "/operationModes/cooling/setpoints/roomTemperature",
        )
        await client.set_data(device_id, "climateControl", "onOffMode", "off")

    endpoint = f"/v1/gateway-devices/{device_id}/management-points/climateControl/characteristics"
    assert backend.requests == [
        (
            "PATCH",
            f"{endpoint}/temperatureControl",
            {"value": 23.5, "path": "/operationModes/cooling/setpoints/roomTemperature"},
        ),
        ("PATCH", f"{endpoint}/onOffMode", {"value": "off"}),
    ]


@pytest.mark.asyncio
async def test_requires_context_manager() -> None:
    client = OnectaClient(_config())
    with pytest.raises(OnectaError, match="not initialized"):
        await client.get_devices()
    assert client.is_rate_limited() is False
    assert not client.rate_limit.is_known
