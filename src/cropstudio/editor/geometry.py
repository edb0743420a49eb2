"""
Geometry primitives for the crop editor.

This module contains pure functions and data structures for the three
coordinate spaces the editor works in, without any dependency on Qt:

* natural image pixels,
* normalized percentages (0-100) of the natural size, used for persistence,
* screen pixels relative to the rendering container, used for hit testing
  and drawing.

The image is shown with "contain" scaling, so screen space and normalized
space are related through the rendered :class:`ImageBounds`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import ClassVar, Optional

from ..config import DEFAULT_CROP_FRACTION
from ..domain.models import AspectMode, NormalizedRect
from ..errors import BoundsNotReadyError


@dataclass(frozen=True)
class ImageBounds:
    """Rendered image rectangle inside its container."""

    offset_x: float
    offset_y: float
    width: float
    height: float

    NOT_READY: ClassVar["ImageBounds"]

    @property
    def is_valid(self) -> bool:
        return self.width > 0.0 and self.height > 0.0

    @property
    def right(self) -> float:
        return self.offset_x + self.width

    @property
    def bottom(self) -> float:
        return self.offset_y + self.height


ImageBounds.NOT_READY = ImageBounds(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in screen space (sub-pixel floats)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def translated(self, x: float, y: float) -> CropRect:
        """Return a copy moved so its top-left corner sits at (*x*, *y*)."""
        return replace(self, x=x, y=y)

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def corners(self) -> dict[str, tuple[float, float]]:
        """Return the four corners keyed by compass direction."""
        return {
            "nw": (self.x, self.y),
            "ne": (self.right, self.y),
            "sw": (self.x, self.bottom),
            "se": (self.right, self.bottom),
        }


class InteractionMode(str, enum.Enum):
    """Active pointer gesture."""

    NONE = "none"
    MOVE = "move"
    RESIZE_NW = "resize-nw"
    RESIZE_NE = "resize-ne"
    RESIZE_SW = "resize-sw"
    RESIZE_SE = "resize-se"

    @property
    def is_resize(self) -> bool:
        return self.value.startswith("resize-")

    @property
    def corner(self) -> Optional[str]:
        """Compass name of the dragged corner for resize modes."""
        if not self.is_resize:
            return None
        return self.value.split("-", 1)[1]

    @classmethod
    def for_corner(cls, corner: str) -> InteractionMode:
        return cls(f"resize-{corner}")


@dataclass(frozen=True)
class InteractionState:
    """Snapshot of the live gesture.

    Every pointer-move is resolved against ``rect_at_start`` and
    ``drag_origin`` rather than the previous frame, so repeated moves to the
    same pointer position always produce the same rectangle.
    """

    mode: InteractionMode = InteractionMode.NONE
    drag_origin: tuple[float, float] = (0.0, 0.0)
    rect_at_start: Optional[CropRect] = None

    @property
    def is_active(self) -> bool:
        return self.mode is not InteractionMode.NONE


IDLE = InteractionState()


def compute_bounds(
    natural_width: float,
    natural_height: float,
    container_width: float,
    container_height: float,
) -> ImageBounds:
    """Return the rendered image rectangle under ``object-fit: contain``.

    A container (or image) that has not been laid out yet yields
    :data:`ImageBounds.NOT_READY`.
    """

    if natural_width <= 0 or natural_height <= 0:
        return ImageBounds.NOT_READY
    if container_width <= 0 or container_height <= 0:
        return ImageBounds.NOT_READY

    image_aspect = float(natural_width) / float(natural_height)
    container_aspect = float(container_width) / float(container_height)

    if image_aspect > container_aspect:
        rendered_width = float(container_width)
        rendered_height = container_width / image_aspect
        return ImageBounds(0.0, (container_height - rendered_height) / 2.0, rendered_width, rendered_height)

    rendered_height = float(container_height)
    rendered_width = container_height * image_aspect
    return ImageBounds((container_width - rendered_width) / 2.0, 0.0, rendered_width, rendered_height)


def _require_ready(bounds: ImageBounds) -> None:
    if not bounds.is_valid:
        raise BoundsNotReadyError(f"image bounds are not ready: {bounds}")


def to_normalized(rect: CropRect, bounds: ImageBounds) -> NormalizedRect:
    """Convert a screen-space crop into percentages of the rendered image."""
    _require_ready(bounds)
    return NormalizedRect(
        (rect.x - bounds.offset_x) / bounds.width * 100.0,
        (rect.y - bounds.offset_y) / bounds.height * 100.0,
        rect.width / bounds.width * 100.0,
        rect.height / bounds.height * 100.0,
    )


def to_screen(rect: NormalizedRect, bounds: ImageBounds) -> CropRect:
    """Inverse of :func:`to_normalized`."""
    _require_ready(bounds)
    return CropRect(
        bounds.offset_x + rect.x / 100.0 * bounds.width,
        bounds.offset_y + rect.y / 100.0 * bounds.height,
        rect.width / 100.0 * bounds.width,
        rect.height / 100.0 * bounds.height,
    )


def normalized_to_pixels(
    rect: NormalizedRect,
    natural_width: int,
    natural_height: int,
) -> tuple[int, int, int, int]:
    """Return ``(left, top, width, height)`` in natural pixels, clamped to the image."""

    left = int(round(rect.x / 100.0 * natural_width))
    top = int(round(rect.y / 100.0 * natural_height))
    left = max(0, min(natural_width - 1, left))
    top = max(0, min(natural_height - 1, top))
    width = int(round(rect.width / 100.0 * natural_width))
    height = int(round(rect.height / 100.0 * natural_height))
    width = max(1, min(natural_width - left, width))
    height = max(1, min(natural_height - top, height))
    return left, top, width, height


def clamp_rect_to_bounds(rect: CropRect, bounds: ImageBounds) -> CropRect:
    """Shrink then shift *rect* so it lies entirely inside *bounds*."""
    width = min(rect.width, bounds.width)
    height = min(rect.height, bounds.height)
    x = max(bounds.offset_x, min(bounds.right - width, rect.x))
    y = max(bounds.offset_y, min(bounds.bottom - height, rect.y))
    return CropRect(x, y, width, height)


def default_crop(
    bounds: ImageBounds,
    aspect_mode: AspectMode,
    fraction: float = DEFAULT_CROP_FRACTION,
) -> CropRect:
    """Centred crop whose width is *fraction* of the shorter rendered side.

    Free crops start square.  A box whose aspect-derived height would not fit
    is scaled down to the full rendered height.
    """

    _require_ready(bounds)
    multiplier = aspect_mode.multiplier or 1.0
    width = fraction * min(bounds.width, bounds.height)
    height = width * multiplier
    if height > bounds.height:
        height = bounds.height
        width = height / multiplier
    return CropRect(
        bounds.offset_x + (bounds.width - width) / 2.0,
        bounds.offset_y + (bounds.height - height) / 2.0,
        width,
        height,
    )
