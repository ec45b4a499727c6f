"""Region-relative and absolute tile coordinates."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

REGION_SIZE = 64
GROUP_MIN = 1
GROUP_MAX = 4


def validate_group(group: int) -> int:
    if not isinstance(group, int) or isinstance(group, bool) or not GROUP_MIN <= group <= GROUP_MAX:
        raise ValueError(f"marker group must be between {GROUP_MIN} and {GROUP_MAX}, got {group!r}")
    return group


@dataclass(frozen=True)
class WorldPoint:
    """Absolute tile position, only meaningful for the current session."""

    x: int
    y: int
    plane: int

    @classmethod
    def from_region(cls, region_id: int, region_x: int, region_y: int, plane: int) -> "WorldPoint":
        return cls(
            ((region_id >> 8) << 6) + region_x,
            ((region_id & 0xFF) << 6) + region_y,
            plane,
        )

    @property
    def region_id(self) -> int:
        return ((self.x >> 6) << 8) | (self.y >> 6)

    @property
    def region_x(self) -> int:
        return self.x & (REGION_SIZE - 1)

    @property
    def region_y(self) -> int:
        return self.y & (REGION_SIZE - 1)


@dataclass(frozen=True)
class RegionPoint:
    """A marked tile stored relative to its region.

    Two records describe the same tile when their :attr:`key` matches; the
    group is an attribute of that single record.
    """

    region_id: int
    region_x: int
    region_y: int
    plane: int
    group: int = GROUP_MIN

    @property
    def key(self) -> Tuple[int, int, int, int]:
        return self.region_id, self.region_x, self.region_y, self.plane

    @classmethod
    def from_world(cls, world_point: WorldPoint, plane: int, group: int) -> "RegionPoint":
        return cls(world_point.region_id, world_point.region_x, world_point.region_y, plane, group)


@dataclass(frozen=True)
class RegionWorldPoint:
    point: RegionPoint
    world_point: WorldPoint
