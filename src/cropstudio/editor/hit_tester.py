"""
Hit testing logic for crop handles.

This module contains pure geometric functions for detecting which crop handle
(if any) is under a given point, with no dependencies on Qt events or UI state.
"""

from __future__ import annotations

import math

from ..config import HANDLE_HIT_PADDING_PX
from .geometry import CropRect, InteractionMode


class HitTester:
    """Pure-function hit tester for the crop box and its corner handles."""

    def __init__(self, hit_padding: float = HANDLE_HIT_PADDING_PX) -> None:
        """Initialize hit tester.

        Parameters
        ----------
        hit_padding:
            Distance threshold for detecting corner hits, in screen pixels.
        """
        self._hit_padding = float(hit_padding)

    @property
    def hit_padding(self) -> float:
        return self._hit_padding

    def test(self, point: tuple[float, float], rect: CropRect) -> InteractionMode:
        """Determine which gesture a pointer-down at *point* would start.

        Corners win over the body so small boxes stay resizable.  When two
        corners are within reach, the nearest one is chosen.

        Returns
        -------
        InteractionMode:
            The resize mode for a corner, ``MOVE`` inside the box, or ``NONE``.
        """
        px, py = float(point[0]), float(point[1])
        best_corner = None
        best_distance = self._hit_padding
        for corner, (cx, cy) in rect.corners().items():
            distance = math.hypot(px - cx, py - cy)
            if distance <= best_distance:
                best_corner = corner
                best_distance = distance
        if best_corner is not None:
            return InteractionMode.for_corner(best_corner)

        if rect.contains(px, py):
            return InteractionMode.MOVE
        return InteractionMode.NONE
