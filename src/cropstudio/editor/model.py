"""
Crop session model for state management.

This module owns the single mutable resource of the editor (the screen-space
crop rectangle plus the live gesture) and the readiness of the rendered image
bounds, without any direct UI interaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CROP_FRACTION, MIN_CROP_SIZE_PX
from ..domain.models import AspectMode, NormalizedRect
from ..domain.services.normalization import sanitize_normalized
from .geometry import (
    IDLE,
    CropRect,
    ImageBounds,
    InteractionMode,
    InteractionState,
    clamp_rect_to_bounds,
    default_crop,
    to_normalized,
    to_screen,
)
from .strategies import InteractionStrategy, MoveStrategy, ResizeStrategy

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Crop captured for a given image generation, in percentages."""

    generation: int
    rect: Optional[NormalizedRect]


class CropSessionModel:
    """Manages crop session data for the image currently being edited.

    Bounds readiness is an explicit state per image selection.  Every
    selection bumps a generation counter, and bounds reports carrying an older
    generation are dropped so a late image-load callback for a previous image
    can never overwrite the current one.
    """

    def __init__(
        self,
        *,
        aspect_mode: AspectMode = AspectMode.SQUARE,
        min_size: float = MIN_CROP_SIZE_PX,
        default_fraction: float = DEFAULT_CROP_FRACTION,
    ) -> None:
        self._aspect_mode = aspect_mode
        self._min_size = float(min_size)
        self._default_fraction = float(default_fraction)

        self._image_id: Optional[str] = None
        self._generation: int = 0
        self._bounds: ImageBounds = ImageBounds.NOT_READY
        self._bounds_ready: bool = False

        self._rect: Optional[CropRect] = None
        self._pending: Optional[NormalizedRect] = None

        self._interaction: InteractionState = IDLE
        self._strategy: Optional[InteractionStrategy] = None
        self._save_outstanding: bool = False

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def image_id(self) -> Optional[str]:
        return self._image_id

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def bounds(self) -> ImageBounds:
        return self._bounds

    @property
    def bounds_ready(self) -> bool:
        return self._bounds_ready

    @property
    def rect(self) -> Optional[CropRect]:
        """Current crop rectangle in screen space, ``None`` until bounds are ready."""
        return self._rect

    @property
    def interaction(self) -> InteractionState:
        return self._interaction

    @property
    def aspect_mode(self) -> AspectMode:
        return self._aspect_mode

    @property
    def min_size(self) -> float:
        return self._min_size

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def is_save_outstanding(self) -> bool:
        return self._save_outstanding

    def normalized(self) -> Optional[NormalizedRect]:
        """Return the current crop in percentages, unrounded."""
        if self._rect is None or not self._bounds_ready:
            return None
        return to_normalized(self._rect, self._bounds)

    # ------------------------------------------------------------------
    # Image selection and bounds
    # ------------------------------------------------------------------
    def select_image(self, image_id: Optional[str], pending: Optional[NormalizedRect] = None) -> int:
        """Switch to *image_id* and return the new generation.

        Any active gesture is cancelled and its uncommitted deltas discarded;
        bounds become "not ready" until the new image reports its size.
        """
        if self._interaction.is_active:
            _LOGGER.debug(
                "Cancelling %s gesture on %s due to image switch",
                self._interaction.mode.value,
                self._image_id,
            )
        self._interaction = IDLE
        self._strategy = None
        self._generation += 1
        self._image_id = image_id
        self._bounds = ImageBounds.NOT_READY
        self._bounds_ready = False
        self._rect = None
        self._pending = sanitize_normalized(pending) if pending is not None else None
        return self._generation

    def set_bounds(self, generation: int, bounds: ImageBounds) -> bool:
        """Record freshly computed bounds for *generation*.

        Returns ``True`` when the bounds were accepted.  Reports for an older
        generation and degenerate bounds (a container still being laid out)
        are ignored.  The first valid report of a generation marks the bounds
        ready and applies the queued rectangle exactly once; later reports are
        container resizes and re-project the current crop.
        """
        if generation != self._generation:
            _LOGGER.debug("Ignoring bounds for stale generation %s (current %s)", generation, self._generation)
            return False
        if not bounds.is_valid:
            return False

        if not self._bounds_ready:
            self._bounds = bounds
            self._bounds_ready = True
            self._apply_pending()
            return True

        previous = self._rect
        normalized = to_normalized(previous, self._bounds) if previous is not None else None
        if self._interaction.is_active:
            self._interaction = IDLE
            self._strategy = None
        self._bounds = bounds
        if normalized is not None:
            self._rect = clamp_rect_to_bounds(to_screen(normalized, bounds), bounds)
        return True

    def queue_normalized(self, rect: Optional[NormalizedRect]) -> bool:
        """Load *rect* (or the default crop when ``None``) for the current image.

        The rectangle is applied immediately when bounds are ready and deferred
        until the first valid bounds report otherwise.  Returns ``True`` when
        it was applied right away.
        """
        self._pending = sanitize_normalized(rect) if rect is not None else None
        if not self._bounds_ready:
            return False
        self._interaction = IDLE
        self._strategy = None
        self._apply_pending()
        return True

    def _apply_pending(self) -> None:
        bounds = self._bounds
        if self._pending is not None:
            self._rect = clamp_rect_to_bounds(to_screen(self._pending, bounds), bounds)
        else:
            self._rect = default_crop(bounds, self._aspect_mode, self._default_fraction)
        self._pending = None
        _LOGGER.debug("Applied crop %s for image %s", self._rect, self._image_id)

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------
    def begin_gesture(self, mode: InteractionMode, pointer: tuple[float, float]) -> bool:
        """Start a *mode* gesture at *pointer*; returns ``False`` when refused.

        Gestures are refused while bounds are not ready and while a save is
        outstanding, so a stale rectangle cannot race the one being written.
        """
        if mode is InteractionMode.NONE:
            return False
        if not self._bounds_ready or self._rect is None or self._save_outstanding:
            return False

        start = self._rect
        if mode is InteractionMode.MOVE:
            self._strategy = MoveStrategy(start=start, origin=pointer, bounds=self._bounds)
        else:
            self._strategy = ResizeStrategy(
                corner=mode.corner,
                start=start,
                origin=pointer,
                bounds=self._bounds,
                aspect_mode=self._aspect_mode,
                min_size=self._min_size,
            )
        self._interaction = InteractionState(
            mode=mode,
            drag_origin=(float(pointer[0]), float(pointer[1])),
            rect_at_start=start,
        )
        return True

    def update_gesture(self, pointer: tuple[float, float]) -> Optional[CropRect]:
        """Resolve the active gesture for *pointer*; ``None`` when idle."""
        if self._strategy is None or not self._interaction.is_active:
            return None
        self._rect = self._strategy.on_drag(pointer)
        return self._rect

    def end_gesture(self) -> Optional[CropRect]:
        """Finish the gesture (pointer-up or pointer-leave) and commit the rect."""
        if not self._interaction.is_active:
            return None
        if self._strategy is not None:
            self._strategy.on_end()
        self._strategy = None
        self._interaction = IDLE
        return self._rect

    def cancel_gesture(self) -> None:
        """Abort the gesture and restore the rectangle it started from."""
        if not self._interaction.is_active:
            return
        self._rect = self._interaction.rect_at_start
        self._strategy = None
        self._interaction = IDLE

    # ------------------------------------------------------------------
    # Editing helpers
    # ------------------------------------------------------------------
    def set_aspect_mode(self, mode: AspectMode) -> None:
        """Change the aspect lock; the current rectangle is left untouched."""
        self._aspect_mode = mode

    def reset_to_default(self) -> bool:
        if not self._bounds_ready:
            return False
        self.cancel_gesture()
        self._rect = default_crop(self._bounds, self._aspect_mode, self._default_fraction)
        return True

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(self._generation, self.normalized())

    def restore(self, snapshot: SessionSnapshot) -> bool:
        """Restore *snapshot* if it still belongs to the current image.

        The crop is re-projected onto the current bounds, so a snapshot taken
        before a container resize lands on the same part of the image.
        """
        if snapshot.generation != self._generation or snapshot.rect is None:
            return False
        if not self._bounds_ready:
            return False
        self.cancel_gesture()
        self._rect = clamp_rect_to_bounds(to_screen(snapshot.rect, self._bounds), self._bounds)
        return True

    def mark_save_started(self) -> None:
        self.end_gesture()
        self._save_outstanding = True

    def mark_save_finished(self) -> None:
        self._save_outstanding = False
