from __future__ import annotations

import copy
from typing import Any

import pytest

_DEVICE_PAYLOAD: dict[str, Any] = {
    "id": "a1b2c3d4-0000-4000-8000-000000000001",
    "deviceModel": "dx4",
    "type": "dx4",
    "isCloudConnectionUp": {"settable": False, "value": True},
    "managementPoints": [
        {
            "embeddedId": "gateway",
            "managementPointType": "gateway",
            "ipAddress": {"settable": False, "value": "192.168.1.20"},
            "macAddress": {"settable": False, "value": "aa:bb:cc:dd:ee:ff"},
            "ssid": {"settable": False, "value": "DaikinAP12345"},
            "serialNumber": {"settable": False, "value": "0123456789"},
            "wifiConnectionSSID": {"settable": False, "value": "home-network"},
            "modelInfo": {"settable": False, "value": "BRP069A78"},
            "firmwareVersion": {"settable": False, "value": "1_28_0"},
        },
        {
            "embeddedId": "climateControl",
            "managementPointType": "climateControl",
            "name": {"settable": True, "value": "Living room", "maxLength": 32},
            "onOffMode": {"settable": True, "value": "on", "values": ["on", "off"]},
            "operationMode": {
                "settable": True,
                "value": "cooling",
                "values": ["fanOnly", "heating", "cooling", "auto", "dry"],
            },
            "powerfulMode": {"settable": True, "value": "off", "values": ["on", "off"]},
            "econoMode": {"settable": True, "value": "off", "values": ["on", "off"]},
            "sensoryData": {
                "settable": False,
                "value": {
                    "roomTemperature": {"settable": False, "value": 23.5, "unit": "°C"},
                    "outdoorTemperature": {"settable": False, "value": 17, "unit": "°C"},
                },
            },
            "temperatureControl": {
                "settable": True,
                "value": {
                    "operationModes": {
                        "cooling": {
                            "setpoints": {
                                "roomTemperature": {
                                    "settable": True,
                                    "value": 22,
                                    "minValue": 18,
                                    "maxValue": 32,
                                    "stepValue": 0.5,
                                }
                            }
                        },
                        "heating": {
                            "setpoints": {
                                "roomTemperature": {
                                    "settable": True,
                                    "value": 21,
                                    "minValue": 10,
                                    "maxValue": 30,
                                    "stepValue": 0.5,
                                }
                            }
                        },
                    }
                },
            },
            "fanControl": {
                "settable": True,
                "value": {
                    "operationModes": {
                        "cooling": {
                            "fanSpeed": {
                                "currentMode": {"settable": True, "value": "auto", "values": ["auto", "quiet", "fixed"]},
                                "modes": {
                                    "fixed": {"settable": True, "value": 3, "minValue": 1, "maxValue": 5, "stepValue": 1}
                                },
                            },
                            "fanDirection": {
                                "vertical": {
                                    "currentMode": {"settable": True, "value": "swing", "values": ["stop", "swing"]}
                                }
                            },
                        }
                    }
                },
            },
            "consumptionData": {"settable": False, "value": {"electrical": {"cooling": {"d": [0.1, 0.2, 0.0]}}}},
            "schedule": {"settable": True, "value": {"currentMode": {"value": "any"}}},
        },
    ],
}


@pytest.fixture
def device_payload() -> dict[str, Any]:
    return copy.deepcopy(_DEVICE_PAYLOAD)
