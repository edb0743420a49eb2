"""
Move strategy for dragging the whole crop box.
"""

from __future__ import annotations

from ..geometry import CropRect, ImageBounds
from .abstract import InteractionStrategy


def move_within_bounds(start: CropRect, dx: float, dy: float, bounds: ImageBounds) -> CropRect:
    """Translate *start* by (*dx*, *dy*) keeping it inside the image bounds."""
    max_x = max(bounds.offset_x, bounds.right - start.width)
    max_y = max(bounds.offset_y, bounds.bottom - start.height)
    x = max(bounds.offset_x, min(start.x + dx, max_x))
    y = max(bounds.offset_y, min(start.y + dy, max_y))
    return start.translated(x, y)


class MoveStrategy(InteractionStrategy):
    """Strategy for moving the crop box without changing its size."""

    def on_drag(self, pointer: tuple[float, float]) -> CropRect:
        dx, dy = self.delta(pointer)
        return move_within_bounds(self._start, dx, dy, self._bounds)
