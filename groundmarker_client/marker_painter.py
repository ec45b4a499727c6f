"""Qt painter adapter that draws the cached ground markers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Sequence, Tuple

from PyQt6.QtCore import QPoint
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen, QPolygon

from groundmarker_plugin.points import RegionWorldPoint, WorldPoint  # type: ignore

FILL_ALPHA = 50
STROKE_WIDTH = 2

TileProjector = Callable[[WorldPoint], Optional[Sequence[Tuple[int, int]]]]


def marker_color(value: str, fallback: str = "#FFFF00") -> QColor:
    color = QColor(value)
    if not color.isValid():
        color = QColor(fallback)
    return color


def fill_color(color: QColor, alpha: int = FILL_ALPHA) -> QColor:
    return QColor(color.red(), color.green(), color.blue(), max(0, min(alpha, 255)))


@dataclass
class MarkerPainter:
    """Strokes and fills each projected marker tile with its group colour."""

    colors: Mapping[int, str] = field(default_factory=dict)
    stroke_width: int = STROKE_WIDTH

    def _pen_and_brush(self, group: int) -> Tuple[QPen, QBrush]:
        color = marker_color(self.colors.get(group, ""))
        pen = QPen(color)
        pen.setWidth(self.stroke_width)
        return pen, QBrush(fill_color(color))

    def paint(self, painter: QPainter, points: Iterable[RegionWorldPoint], project: TileProjector) -> int:
        """Draw every marker that projects on screen; returns how many were drawn."""

        drawn = 0
        for marker in points:
            corners = project(marker.world_point)
            if not corners:
                continue
            polygon = QPolygon([QPoint(int(x), int(y)) for x, y in corners])
            pen, brush = self._pen_and_brush(marker.point.group)
            painter.setPen(pen)
            painter.setBrush(brush)
            painter.drawPolygon(polygon)
            drawn += 1
        return drawn
