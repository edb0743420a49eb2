"""
Interaction strategies for the crop editor.

This package implements the Strategy pattern for the two gesture families
(move vs corner resize), allowing clean separation of the delta math from the
pointer bookkeeping in the session model.
"""

from .abstract import InteractionStrategy
from .move_strategy import MoveStrategy, move_within_bounds
from .resize_strategy import ResizeStrategy, anchor_sign, resize_from_anchor

__all__ = [
    "InteractionStrategy",
    "MoveStrategy",
    "ResizeStrategy",
    "anchor_sign",
    "move_within_bounds",
    "resize_from_anchor",
]
