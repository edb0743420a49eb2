"""
Crop editor core.

This package provides the contain-fit geometry, the drag/resize state
machine and the controller that connects them to persistence, implementing
the Strategy pattern for gestures.
"""

from .controller import CropInteractionController
from .geometry import (
    CropRect,
    ImageBounds,
    InteractionMode,
    InteractionState,
    compute_bounds,
    default_crop,
    to_normalized,
    to_screen,
)
from .hit_tester import HitTester
from .model import CropSessionModel, SessionSnapshot
from .utils import cursor_for_mode

__all__ = [
    "CropInteractionController",
    "CropRect",
    "CropSessionModel",
    "HitTester",
    "ImageBounds",
    "InteractionMode",
    "InteractionState",
    "SessionSnapshot",
    "compute_bounds",
    "cursor_for_mode",
    "default_crop",
    "to_normalized",
    "to_screen",
]
