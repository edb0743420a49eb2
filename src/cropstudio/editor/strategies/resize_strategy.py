"""
Resize strategy for corner-handle dragging.

All four corners share a single implementation parameterised by the sign of
the dragged corner relative to the fixed anchor (the opposite corner).
"""

from __future__ import annotations

from typing import Optional

from ...config import MIN_CROP_SIZE_PX
from ...domain.models import AspectMode
from ..geometry import CropRect, ImageBounds
from .abstract import InteractionStrategy

_CORNER_SIGNS: dict[str, tuple[int, int]] = {
    "nw": (-1, -1),
    "ne": (1, -1),
    "sw": (-1, 1),
    "se": (1, 1),
}


def anchor_sign(corner: str) -> tuple[int, int]:
    """Return ``(sx, sy)``: +1 when the dragged corner lies right of / below the anchor."""
    try:
        return _CORNER_SIGNS[corner]
    except KeyError:
        raise ValueError(f"unknown corner {corner!r}") from None


def resize_from_anchor(
    start: CropRect,
    corner: str,
    dx: float,
    dy: float,
    bounds: ImageBounds,
    multiplier: Optional[float],
    min_size: float = MIN_CROP_SIZE_PX,
) -> CropRect:
    """Resize *start* by dragging *corner* by (*dx*, *dy*).

    The corner opposite *corner* stays fixed.  With a *multiplier* the height
    always follows ``width * multiplier``; otherwise both sides follow the
    pointer independently.  Sides never shrink below *min_size* through the
    pointer, and the box is clipped to the room between the anchor and the
    bounds edge, recomputing the locked side whenever a clip binds.  When a
    clip would push a side below the floor (a start box that does not match
    the aspect lock, hard against an edge) the start box is kept.
    """

    sx, sy = anchor_sign(corner)
    anchor_x = start.x if sx > 0 else start.right
    anchor_y = start.y if sy > 0 else start.bottom
    room_x = bounds.right - anchor_x if sx > 0 else anchor_x - bounds.offset_x
    room_y = bounds.bottom - anchor_y if sy > 0 else anchor_y - bounds.offset_y

    new_width = max(min_size, start.width + sx * dx)
    if multiplier is not None:
        new_height = new_width * multiplier
    else:
        new_height = max(min_size, start.height + sy * dy)

    if new_width > room_x:
        new_width = room_x
        if multiplier is not None:
            new_height = new_width * multiplier
    if new_height > room_y:
        new_height = room_y
        if multiplier is not None:
            new_width = new_height / multiplier

    if new_width < min(min_size, start.width) or new_height < min(min_size, start.height):
        return start

    new_x = anchor_x if sx > 0 else anchor_x - new_width
    new_y = anchor_y if sy > 0 else anchor_y - new_height
    return CropRect(new_x, new_y, new_width, new_height)


class ResizeStrategy(InteractionStrategy):
    """Strategy for resizing the crop box from one of its corners."""

    def __init__(
        self,
        *,
        corner: str,
        start: CropRect,
        origin: tuple[float, float],
        bounds: ImageBounds,
        aspect_mode: AspectMode,
        min_size: float = MIN_CROP_SIZE_PX,
    ) -> None:
        """Initialize resize strategy.

        Parameters
        ----------
        corner:
            Compass name of the dragged corner (``nw``, ``ne``, ``sw``, ``se``).
        start:
            Crop rectangle at pointer-down.
        origin:
            Pointer position at pointer-down.
        bounds:
            Rendered image bounds the crop must stay inside.
        aspect_mode:
            Aspect lock applied to the resized box.
        min_size:
            Floor for either side, in screen pixels.
        """
        super().__init__(start=start, origin=origin, bounds=bounds)
        anchor_sign(corner)
        self._corner = corner
        self._multiplier = aspect_mode.multiplier
        self._min_size = float(min_size)

    @property
    def corner(self) -> str:
        return self._corner

    def on_drag(self, pointer: tuple[float, float]) -> CropRect:
        dx, dy = self.delta(pointer)
        return resize_from_anchor(
            self._start,
            self._corner,
            dx,
            dy,
            self._bounds,
            self._multiplier,
            self._min_size,
        )
