"""Mark/unmark toggling for a single tile of a region."""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .points import RegionPoint, validate_group


def current_group(points: Iterable[RegionPoint], key: Tuple[int, int, int, int]) -> Optional[int]:
    for existing in points:
        if existing.key == key:
            return existing.group
    return None


def toggle_point(points: Iterable[RegionPoint], point: RegionPoint) -> List[RegionPoint]:
    """Return the region's points after toggling ``point``'s group on its tile.

    An unmarked tile gains ``point``; a tile marked with another group moves to
    ``point.group``; a tile already in ``point.group`` is unmarked.
    """

    validate_group(point.group)
    updated: List[RegionPoint] = []
    previous: Optional[RegionPoint] = None
    for existing in points:
        if existing.key == point.key:
            previous = existing
            continue
        updated.append(existing)
    if previous is None or previous.group != point.group:
        updated.append(point)
    return updated
