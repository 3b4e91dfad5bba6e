"""Helpers for safe debug logging.

Device snapshots carry network identifiers (IP/MAC addresses, SSIDs),
serial numbers and energy/schedule records; HTTP traffic carries bearer
tokens. Nothing from either may reach a log record unredacted.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from pyonecta._constants import REDACTED, SENSITIVE_RECORD_FIELDS, SENSITIVE_VALUE_FIELDS
from pyonecta.models.device import GatewayDevice

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "access_token",
        "accesstoken",
        "refresh_token",
        "refreshtoken",
        "id_token",
        "token",
        "authorization",
        "client_secret",
        "cookie",
        "password",
    }
)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)


def _mask_management_point(management_point: dict[str, Any]) -> None:
    for key in SENSITIVE_VALUE_FIELDS:
        field = management_point.get(key)
        if field is None:
            continue
        if isinstance(field, dict):
            field["value"] = REDACTED
        else:
            management_point[key] = REDACTED

    for key in SENSITIVE_RECORD_FIELDS:
        if management_point.get(key) is not None:
            management_point[key] = REDACTED


def mask_sensitive_device_data(descriptor: Mapping[str, Any] | GatewayDevice) -> dict[str, Any]:
    """Return a deep copy of a device descriptor with operator data masked.

    Accepts the raw cloud payload or a :class:`GatewayDevice` (whose
    ``raw`` payload is used). The input is never modified.

    In every management point, network identifiers and serial numbers keep
    their datapoint shape with ``value`` set to ``"REDACTED"``; consumption
    and schedule records are replaced by ``"REDACTED"`` entirely. A missing
    ``managementPoints`` key stays missing and an empty list stays empty.
    """
    source = descriptor.raw if isinstance(descriptor, GatewayDevice) else descriptor
    cloned: dict[str, Any] = copy.deepcopy(dict(source))

    management_points = cloned.get("managementPoints")
    if isinstance(management_points, list):
        for management_point in management_points:
            if isinstance(management_point, dict):
                _mask_management_point(management_point)
    return cloned
