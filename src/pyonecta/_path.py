"""Read-only navigation of a device's datapoint tree.

A datapoint path such as ``/operationModes/cooling/setpoints/roomTemperature``
is resolved by unwrapping ``value`` wherever a node exposes one and then
descending into the named child. The tree is never modified.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pyonecta.exceptions import OnectaDataNotFoundError, OnectaValidationError
from pyonecta.models.device import Datapoint, GatewayDevice


def split_path(path: str | None) -> list[str]:
    """Split a slash-delimited path, dropping empty segments."""
    if not path:
        return []
    return [segment for segment in path.split("/") if segment]


def _not_found(
    message: str,
    management_point_id: str,
    datapoint_key: str,
    path: str | None,
) -> OnectaDataNotFoundError:
    return OnectaDataNotFoundError(
        message,
        management_point_id=management_point_id,
        datapoint=datapoint_key,
        path=path,
    )


def resolve_datapoint(
    device: GatewayDevice,
    management_point_id: str,
    datapoint_key: str,
    path: str | None = None,
) -> Datapoint:
    """Return the datapoint (or nested leaf) addressed by the arguments.

    Raises
    ------
    OnectaDataNotFoundError
        When the management point, the datapoint or any path segment is
        missing, or a node on the way is not an object.
    OnectaValidationError
        When the addressed leaf exists but its metadata (``minValue``,
        ``values``, ...) has the wrong type.
    """
    management_point = device.management_point(management_point_id)
    if management_point is None:
        raise _not_found(
            f"Management point {management_point_id!r} not found on device {device.id}",
            management_point_id,
            datapoint_key,
            path,
        )

    datapoint = management_point.get(datapoint_key)
    if datapoint is None:
        raise _not_found(
            f"Datapoint {datapoint_key!r} not found in management point {management_point_id!r}",
            management_point_id,
            datapoint_key,
            path,
        )

    segments = split_path(path)
    if not segments:
        return datapoint

    full_path = "/".join([management_point_id, datapoint_key, *segments])
    node: Any = datapoint.value
    for index, segment in enumerate(segments):
        if index and isinstance(node, Mapping) and "value" in node:
            node = node["value"]
        if not isinstance(node, Mapping) or segment not in node:
            raise _not_found(
                f"Path {full_path} not found (missing {segment!r})",
                management_point_id,
                datapoint_key,
                path,
            )
        node = node[segment]

    if isinstance(node, Mapping) and "value" in node:
        try:
            return Datapoint.model_validate(node)
        except ValidationError as exc:
            raise OnectaValidationError(f"Datapoint at {full_path} is malformed: {exc}") from exc
    return Datapoint(value=node)
