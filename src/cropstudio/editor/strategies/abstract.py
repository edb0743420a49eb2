"""
Abstract base class for crop interaction strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..geometry import CropRect, ImageBounds


class InteractionStrategy(ABC):
    """Base class for crop gestures (move, resize).

    A strategy is created on pointer-down with the rectangle and pointer
    position at that moment, and resolves every later pointer position
    against that snapshot.
    """

    def __init__(self, *, start: CropRect, origin: tuple[float, float], bounds: ImageBounds) -> None:
        self._start = start
        self._origin = (float(origin[0]), float(origin[1]))
        self._bounds = bounds

    @property
    def start(self) -> CropRect:
        return self._start

    def delta(self, pointer: tuple[float, float]) -> tuple[float, float]:
        """Return the pointer offset from the gesture origin."""
        return (float(pointer[0]) - self._origin[0], float(pointer[1]) - self._origin[1])

    @abstractmethod
    def on_drag(self, pointer: tuple[float, float]) -> CropRect:
        """Return the crop rectangle for the pointer at *pointer*.

        Parameters
        ----------
        pointer:
            Current pointer position in screen coordinates.
        """

    def on_end(self) -> None:
        """Handle end of interaction (pointer release or leave)."""
