"""Session provider surface the plugin reads world state from."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

from .instance_translator import ChunkTable, InstanceContext


class WorldView(Protocol):
    base_x: int
    base_y: int
    plane: int

    def map_regions(self) -> Optional[Sequence[int]]:
        ...

    def is_instanced(self) -> bool:
        ...

    def instance_template_chunks(self) -> Optional[ChunkTable]:
        ...

    def selected_scene_tile(self) -> Optional[Tuple[int, int]]:
        ...


@dataclass
class StaticWorldView:
    """Plain-data :class:`WorldView` for standalone runs and tests."""

    regions: Optional[List[int]] = field(default_factory=list)
    instanced: bool = False
    template_chunks: Optional[ChunkTable] = None
    base_x: int = 0
    base_y: int = 0
    plane: int = 0
    selected_tile: Optional[Tuple[int, int]] = None

    def map_regions(self) -> Optional[Sequence[int]]:
        return self.regions

    def is_instanced(self) -> bool:
        return self.instanced

    def instance_template_chunks(self) -> Optional[ChunkTable]:
        return self.template_chunks

    def selected_scene_tile(self) -> Optional[Tuple[int, int]]:
        return self.selected_tile


def instance_context(world: WorldView) -> InstanceContext:
    instanced = bool(world.is_instanced())
    return InstanceContext(
        instanced=instanced,
        template_chunks=world.instance_template_chunks() if instanced else None,
        base_x=world.base_x,
        base_y=world.base_y,
    )
