from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

import pytest
from pydantic import ValidationError

from pyonecta.device import OnectaDevice
from pyonecta.exceptions import OnectaValidationError
from pyonecta.models.device import GatewayDevice, parse_gateway_device


class _Clock:
    def __init__(self) -> None:
        self.ticks = 0

    def __call__(self) -> datetime:
        self.ticks += 1
        return datetime(2024, 1, 1, 12, 0, self.ticks, tzinfo=UTC)


def test_description(device_payload: dict[str, Any]) -> None:
    device = OnectaDevice(device_payload)

    desc = device.get_description()

    assert device.get_id() == "a1b2c3d4-0000-4000-8000-000000000001"
    assert desc.device_model == "dx4"
    assert desc.management_points == ("gateway", "climateControl")


def test_description_defaults_unknown_model() -> None:
    device = OnectaDevice({"id": "dev-1"})
    assert device.get_description().device_model == "Unknown"
    assert device.get_description().management_points == ()


def test_snapshot_fields(device_payload: dict[str, Any]) -> None:
    snapshot = parse_gateway_device(device_payload)

    assert snapshot.is_cloud_connection_up is True
    climate = snapshot.management_point("climateControl")
    assert climate is not None
    assert climate.management_point_type == "climateControl"
    assert set(climate.datapoints) >= {"onOffMode", "operationMode", "fanControl", "schedule"}
    assert climate.get("name").model_extra == {"maxLength": 32}
    assert snapshot.management_point("domesticHotWaterTank") is None


def test_snapshot_is_frozen(device_payload: dict[str, Any]) -> None:
    snapshot = parse_gateway_device(device_payload)
    with pytest.raises(ValidationError):
        snapshot.id = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    "payload",
    [
        {"deviceModel": "dx4"},
        {"id": "   "},
        {"id": "dev-1", "managementPoints": [{"managementPointType": "gateway"}]},
        {"id": "dev-1", "managementPoints": [{"embeddedId": "gateway"}, {"embeddedId": "gateway"}]},
        ["not", "an", "object"],
    ],
)
def test_invalid_payload_rejected(payload: Any) -> None:
    with pytest.raises(OnectaValidationError):
        parse_gateway_device(payload)


def test_update_raw_data_replaces_snapshot(device_payload: dict[str, Any]) -> None:
    clock = _Clock()
    device = OnectaDevice(device_payload, clock=clock)
    old_snapshot = device.desc
    first_update = device.last_updated

    new_payload = copy.deepcopy(device_payload)
    new_payload["managementPoints"][1]["onOffMode"]["value"] = "off"
    device.update_raw_data(new_payload)

    assert device.get_value("climateControl", "onOffMode") == "off"
    assert device.desc is not old_snapshot
    assert old_snapshot.management_point("climateControl").get("onOffMode").value == "on"
    assert device.last_updated > first_update


def test_update_raw_data_accepts_snapshot(device_payload: dict[str, Any]) -> None:
    device = OnectaDevice({"id": device_payload["id"]})
    snapshot = GatewayDevice.model_validate(device_payload)

    device.update_raw_data(snapshot)

    assert device.desc is snapshot


def test_invalid_update_keeps_previous_snapshot(device_payload: dict[str, Any]) -> None:
    clock = _Clock()
    device = OnectaDevice(device_payload, clock=clock)
    old_snapshot = device.desc
    last_updated = device.last_updated

    with pytest.raises(OnectaValidationError):
        device.update_raw_data({"id": ""})

    assert device.desc is old_snapshot
    assert device.last_updated == last_updated


def test_listeners_fire_on_replacement(device_payload: dict[str, Any]) -> None:
    device = OnectaDevice(device_payload)
    seen: list[str] = []

    def _broken(_: OnectaDevice) -> None:
        raise RuntimeError("listener bug")

    remove = device.add_listener(lambda d: seen.append(d.get_value("climateControl", "onOffMode")))
    device.add_listener(_broken)

    device.update_raw_data(device_payload)
    remove()
    remove()
    device.update_raw_data(device_payload)

    assert seen == ["on"]


def test_masked_snapshot(device_payload: dict[str, Any]) -> None:
    device = OnectaDevice(device_payload)

    masked = device.masked()

    assert masked["managementPoints"][0]["macAddress"]["value"] == "REDACTED"
    assert device.get_value("gateway", "macAddress") == "aa:bb:cc:dd:ee:ff"


def test_snapshot_does_not_follow_payload_edits(device_payload: dict[str, Any]) -> None:
    device = OnectaDevice(device_payload)
    room = device_payload["managementPoints"][1]["sensoryData"]["value"]["roomTemperature"]

    room["value"] = 99
    assert device.get_value("climateControl", "sensoryData", "/roomTemperature") == 23.5

    updated = copy.deepcopy(device_payload)
    updated["managementPoints"][1]["onOffMode"]["value"] = "off"
    device.update_raw_data(updated)
    updated["managementPoints"][1]["onOffMode"]["value"] = "on"
    updated["managementPoints"][1]["operationMode"]["values"].append("heatOnly")

    assert device.get_value("climateControl", "onOffMode") == "off"
    assert "heatOnly" not in device.get_data("climateControl", "operationMode").values
    assert device.desc.raw["managementPoints"][1]["onOffMode"]["value"] == "off"
