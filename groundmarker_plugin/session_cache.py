"""World-coordinate snapshot of every marker in the loaded regions."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .instance_translator import InstanceContext, translate_points
from .point_store import PointStore
from .points import RegionWorldPoint

_LOGGER = logging.getLogger("GroundMarkers.Cache")


class SessionPointCache:
    """Holds the markers renderers draw; always rebuilt wholesale."""

    def __init__(self, store: PointStore) -> None:
        self._store = store
        self._points: Tuple[RegionWorldPoint, ...] = ()

    @property
    def points(self) -> Tuple[RegionWorldPoint, ...]:
        return self._points

    def clear(self) -> None:
        self._points = ()

    def rebuild(self, region_ids: Optional[Iterable[int]], context: InstanceContext) -> Tuple[RegionWorldPoint, ...]:
        if region_ids is None:
            self._points = ()
            return self._points
        collected: List[RegionWorldPoint] = []
        for region_id in region_ids:
            _LOGGER.debug("Loading points for region %s", region_id)
            collected.extend(translate_points(self._store.get(region_id), context))
        self._points = tuple(collected)
        return self._points
