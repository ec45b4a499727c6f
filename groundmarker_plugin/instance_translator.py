"""Instance-aware translation between region-relative and world coordinates.

Instanced areas are assembled from template chunks: each cell of the
session's chunk table names the template chunk it copies and the quarter
turns applied to it. Stored markers are always template-relative, so they
are projected forward into the instance when regions load and clicks are
projected back (inverse rotation) before being stored.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .points import RegionPoint, RegionWorldPoint, WorldPoint

CHUNK_SIZE = 8

ChunkTable = Sequence[Sequence[Sequence[int]]]


@dataclass(frozen=True)
class TemplateChunk:
    rotation: int
    x: int
    y: int
    plane: int

    def contains(self, point: WorldPoint) -> bool:
        return self.x <= point.x < self.x + CHUNK_SIZE and self.y <= point.y < self.y + CHUNK_SIZE


@dataclass
class InstanceContext:
    """Snapshot of the session geometry the translator needs."""

    instanced: bool = False
    template_chunks: Optional[ChunkTable] = None
    base_x: int = 0
    base_y: int = 0

    def chunks_for_plane(self, plane: int) -> Sequence[Sequence[int]]:
        table = self.template_chunks
        if not table or plane < 0 or plane >= len(table):
            return ()
        return table[plane] or ()


def decode_chunk(cell: int) -> TemplateChunk:
    """Unpack a chunk table cell; coordinates come back in world units."""

    return TemplateChunk(
        rotation=cell >> 1 & 0x3,
        y=(cell >> 3 & 0x7FF) * CHUNK_SIZE,
        x=(cell >> 14 & 0x3FF) * CHUNK_SIZE,
        plane=cell >> 24 & 0x3,
    )


def rotate(point: WorldPoint, rotation: int) -> WorldPoint:
    """Rotate ``point`` inside its chunk by ``rotation`` quarter turns."""

    chunk_x = point.x & -CHUNK_SIZE
    chunk_y = point.y & -CHUNK_SIZE
    x = point.x & (CHUNK_SIZE - 1)
    y = point.y & (CHUNK_SIZE - 1)
    rotation %= 4
    if rotation == 1:
        return WorldPoint(chunk_x + y, chunk_y + (CHUNK_SIZE - 1 - x), point.plane)
    if rotation == 2:
        return WorldPoint(chunk_x + (CHUNK_SIZE - 1 - x), chunk_y + (CHUNK_SIZE - 1 - y), point.plane)
    if rotation == 3:
        return WorldPoint(chunk_x + (CHUNK_SIZE - 1 - y), chunk_y + x, point.plane)
    return point


def rotate_inverse(point: WorldPoint, rotation: int) -> WorldPoint:
    """Undo :func:`rotate`, bringing an instance tile back to rotation 0."""

    return rotate(point, (4 - rotation) % 4)


def translate_to_world(point: RegionPoint, context: InstanceContext) -> List[WorldPoint]:
    template = WorldPoint.from_region(point.region_id, point.region_x, point.region_y, point.plane)
    if not context.instanced:
        return [template]

    # A template chunk may be copied into several instance cells; emit every copy.
    matches: List[WorldPoint] = []
    for chunk_x, column in enumerate(context.chunks_for_plane(point.plane)):
        for chunk_y, cell in enumerate(column or ()):
            chunk = decode_chunk(cell)
            if not chunk.contains(template):
                continue
            placed = WorldPoint(
                context.base_x + chunk_x * CHUNK_SIZE + (template.x & (CHUNK_SIZE - 1)),
                context.base_y + chunk_y * CHUNK_SIZE + (template.y & (CHUNK_SIZE - 1)),
                template.plane,
            )
            matches.append(rotate(placed, chunk.rotation))
    return matches


def translate_points(points: Iterable[RegionPoint], context: InstanceContext) -> List[RegionWorldPoint]:
    return [
        RegionWorldPoint(point, world_point)
        for point in points
        for world_point in translate_to_world(point, context)
    ]


def world_from_scene_instance(scene_x: int, scene_y: int, plane: int, context: InstanceContext) -> Optional[WorldPoint]:
    """Resolve a scene tile to the template world tile it was copied from.

    Returns ``None`` when the tile lies outside the loaded chunk table.
    """

    if not context.instanced:
        return WorldPoint(context.base_x + scene_x, context.base_y + scene_y, plane)
    if scene_x < 0 or scene_y < 0:
        return None
    plane_chunks = context.chunks_for_plane(plane)
    chunk_x = scene_x // CHUNK_SIZE
    chunk_y = scene_y // CHUNK_SIZE
    if chunk_x >= len(plane_chunks):
        return None
    column = plane_chunks[chunk_x] or ()
    if chunk_y >= len(column):
        return None
    chunk = decode_chunk(column[chunk_y])
    template = WorldPoint(
        chunk.x + (scene_x & (CHUNK_SIZE - 1)),
        chunk.y + (scene_y & (CHUNK_SIZE - 1)),
        chunk.plane,
    )
    return rotate_inverse(template, chunk.rotation)
