"""Pure helpers that keep normalized (percentage) crops well formed.

Persisted crops may come from older builds or external writers, and detector
suggestions are only loosely trustworthy.  Neither is ever rejected: values are
pulled back into ``[0, 100]`` and re-derived so the rectangle stays inside the
image.
"""

from __future__ import annotations

import math

from ...config import DEFAULT_CROP_FRACTION, MAX_SUGGESTED_PCT
from ..models import AspectMode, NormalizedRect

_MIN_SIDE_PCT = 1.0


def _finite(value: float, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def sanitize_normalized(rect: NormalizedRect, min_side: float = _MIN_SIDE_PCT) -> NormalizedRect:
    """Clamp *rect* into ``[0, 100]`` so that ``x + width`` and ``y + height``
    never exceed 100 and both sides stay at least *min_side* points wide."""

    x = _clamp(_finite(rect.x, 0.0), 0.0, 100.0)
    y = _clamp(_finite(rect.y, 0.0), 0.0, 100.0)
    width = _clamp(_finite(rect.width, 100.0), min_side, 100.0)
    height = _clamp(_finite(rect.height, 100.0), min_side, 100.0)

    if x + width > 100.0:
        width = 100.0 - x
        if width < min_side:
            width = min_side
            x = 100.0 - min_side
    if y + height > 100.0:
        height = 100.0 - y
        if height < min_side:
            height = min_side
            y = 100.0 - min_side
    return NormalizedRect(x, y, width, height)


def clamp_suggestion(
    rect: NormalizedRect,
    max_pct: float = MAX_SUGGESTED_PCT,
) -> tuple[NormalizedRect, bool]:
    """Apply the oversize policy to a detector suggestion.

    Returns the accepted rect and whether it had to be shrunk.  An oversized
    box is scaled uniformly until neither side exceeds *max_pct*, then
    re-centred on its original centre, shifted only as far as needed to stay
    inside the image.
    """

    rect = sanitize_normalized(rect)
    scale = min(1.0, max_pct / rect.width, max_pct / rect.height)
    if scale >= 1.0:
        return rect, False

    width = rect.width * scale
    height = rect.height * scale
    cx, cy = rect.center
    x = _clamp(cx - width / 2.0, 0.0, 100.0 - width)
    y = _clamp(cy - height / 2.0, 0.0, 100.0 - height)
    return NormalizedRect(x, y, width, height), True


def default_normalized(
    natural_width: int,
    natural_height: int,
    aspect_mode: AspectMode,
    fraction: float = DEFAULT_CROP_FRACTION,
) -> NormalizedRect:
    """Centred default crop, *fraction* of the shorter natural side wide.

    Free crops default to a square.  When the aspect-derived height would not
    fit, the box is scaled down to the full image height.
    """

    if natural_width <= 0 or natural_height <= 0:
        raise ValueError("natural image size must be positive")
    multiplier = aspect_mode.multiplier or 1.0
    side_px = fraction * min(natural_width, natural_height)
    width_px = side_px
    height_px = side_px * multiplier
    if height_px > natural_height:
        height_px = float(natural_height)
        width_px = height_px / multiplier
    width = width_px / natural_width * 100.0
    height = height_px / natural_height * 100.0
    return NormalizedRect((100.0 - width) / 2.0, (100.0 - height) / 2.0, width, height)
