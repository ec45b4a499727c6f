"""Region-keyed persistence for marked tiles."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Mapping

from .config_store import ConfigManager
from .points import GROUP_MIN, REGION_SIZE, RegionPoint, validate_group

CONFIG_GROUP = "groundMarker"
REGION_PREFIX = "region_"

_LOGGER = logging.getLogger("GroundMarkers.Store")


class MalformedPointData(ValueError):
    """Raised when a persisted region entry cannot be decoded."""


def region_key(region_id: int) -> str:
    return f"{REGION_PREFIX}{region_id}"


def _coerce_field(entry: Mapping[str, Any], *names: str) -> int:
    for name in names:
        if name in entry:
            value = entry[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedPointData(f"field {name!r} must be an integer, got {value!r}")
            return value
    raise MalformedPointData(f"missing field {names[0]!r}")


def encode_points(points: Iterable[RegionPoint]) -> str:
    payload = [
        {
            "regionId": point.region_id,
            "regionX": point.region_x,
            "regionY": point.region_y,
            "plane": point.plane,
            "group": point.group,
        }
        for point in points
    ]
    return json.dumps(payload, separators=(",", ":"))


def decode_points(text: str) -> List[RegionPoint]:
    """Parse a serialised region entry, raising :class:`MalformedPointData` on bad input."""

    try:
        raw = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise MalformedPointData(f"invalid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise MalformedPointData("expected a list of points")
    points: List[RegionPoint] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise MalformedPointData(f"expected an object, got {type(entry).__name__}")
        region_x = _coerce_field(entry, "regionX")
        region_y = _coerce_field(entry, "regionY")
        if not (0 <= region_x < REGION_SIZE and 0 <= region_y < REGION_SIZE):
            raise MalformedPointData(f"region offset ({region_x}, {region_y}) outside the region")
        group = _coerce_field(entry, "group") if "group" in entry else GROUP_MIN
        try:
            validate_group(group)
        except ValueError as exc:
            raise MalformedPointData(str(exc)) from exc
        points.append(
            RegionPoint(
                region_id=_coerce_field(entry, "regionId"),
                region_x=region_x,
                region_y=region_y,
                plane=_coerce_field(entry, "plane", "z"),
                group=group,
            )
        )
    return points


class PointStore:
    """Reads and writes the full point collection of one region at a time."""

    def __init__(self, config_manager: ConfigManager, config_group: str = CONFIG_GROUP) -> None:
        self._config = config_manager
        self._group = config_group

    def get(self, region_id: int) -> List[RegionPoint]:
        text = self._config.get_configuration(self._group, region_key(region_id))
        if not text or not text.strip():
            return []
        try:
            return decode_points(text)
        except MalformedPointData as exc:
            _LOGGER.warning("Ignoring malformed markers for region %s: %s", region_id, exc)
            return []

    def put(self, region_id: int, points: Iterable[RegionPoint]) -> None:
        points = list(points)
        key = region_key(region_id)
        if not points:
            self._config.unset_configuration(self._group, key)
            return
        self._config.set_configuration(self._group, key, encode_points(points))
