"""
Crop interaction controller.

This module coordinates the session model, the hit tester and the
persistence use cases.  It knows nothing about widgets: the render surface
feeds it pointer positions and layout sizes and receives callbacks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from PySide6.QtCore import Qt

from ..application.use_cases.load_crop import LoadCropRequest, LoadCropUseCase
from ..application.use_cases.save_crop import SaveCropRequest, SaveCropUseCase
from ..application.use_cases.suggest_crop import SuggestCropRequest, SuggestCropUseCase
from ..config import HANDLE_HIT_PADDING_PX, MAX_SUGGESTED_PCT, MIN_CROP_SIZE_PX
from ..domain.models import AspectMode, NormalizedRect
from ..errors.handler import ErrorHandler
from .geometry import CropRect, InteractionMode, compute_bounds
from .hit_tester import HitTester
from .model import CropSessionModel, SessionSnapshot
from .utils import cursor_for_mode

_LOGGER = logging.getLogger(__name__)


class CropInteractionController:
    """Manages crop interactions and persistence for one editor surface."""

    def __init__(
        self,
        *,
        load_use_case: LoadCropUseCase,
        save_use_case: SaveCropUseCase,
        on_crop_changed: Callable[[Optional[NormalizedRect]], None],
        on_cursor_change: Callable[[Qt.CursorShape | None], None],
        on_request_update: Callable[[], None],
        suggest_use_case: SuggestCropUseCase | None = None,
        error_handler: ErrorHandler | None = None,
        aspect_mode: AspectMode = AspectMode.SQUARE,
        min_size: float = MIN_CROP_SIZE_PX,
        hit_padding: float = HANDLE_HIT_PADDING_PX,
        max_suggested_pct: float = MAX_SUGGESTED_PCT,
    ) -> None:
        """Initialize the crop interaction controller.

        Parameters
        ----------
        load_use_case:
            Reads the persisted crop when an image is selected.
        save_use_case:
            Writes the crop on :meth:`save`.
        on_crop_changed:
            Callback receiving the current crop in percentages (unrounded),
            or ``None`` when nothing is shown.
        on_cursor_change:
            Callback to change cursor, signature: (cursor_shape or None to unset).
        on_request_update:
            Callback to request widget update/repaint.
        suggest_use_case:
            Optional auto-detection entry point used by :meth:`suggest`.
        error_handler:
            Receives notices for failed saves and detection fallbacks.
        """
        self._load = load_use_case
        self._save = save_use_case
        self._suggest = suggest_use_case
        self._errors = error_handler
        self._on_crop_changed_callback = on_crop_changed
        self._on_cursor_change = on_cursor_change
        self._on_request_update = on_request_update
        self._max_suggested_pct = float(max_suggested_pct)
        self._aspect_mode = aspect_mode

        self._model = CropSessionModel(aspect_mode=aspect_mode, min_size=min_size)
        self._hit_tester = HitTester(hit_padding=hit_padding)

        self._natural_size: Optional[tuple[int, int]] = None
        self._container_size: tuple[float, float] = (0.0, 0.0)
        self._saved_rect: Optional[NormalizedRect] = None
        self._undo: Optional[SessionSnapshot] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def model(self) -> CropSessionModel:
        return self._model

    @property
    def natural_size(self) -> Optional[tuple[int, int]]:
        return self._natural_size

    def current_rect(self) -> Optional[CropRect]:
        """Return the crop rectangle in screen space."""
        return self._model.rect

    def current_normalized(self) -> Optional[NormalizedRect]:
        """Return the crop in percentages exactly as it would be saved."""
        normalized = self._model.normalized()
        return normalized.rounded() if normalized is not None else None

    def select_image(self, image_id: Optional[str]) -> int:
        """Switch the editor to *image_id* and return the selection generation.

        The persisted crop (if any) is loaded and queued; it is shown once the
        new image reports its size through :meth:`on_image_loaded`.  A saved
        crop brings its own aspect lock for this image only; otherwise the
        lock chosen through :meth:`set_aspect_mode` applies.
        """
        pending: Optional[NormalizedRect] = None
        self._saved_rect = None
        self._undo = None
        self._model.set_aspect_mode(self._aspect_mode)
        if image_id is not None:
            response = self._load.execute(LoadCropRequest(image_id=image_id))
            if not response.success:
                self._notice(f"Could not load the saved crop: {response.error}", image_id)
            elif response.rect is not None:
                pending = response.rect
                self._saved_rect = response.rect
                if response.aspect_mode is not None:
                    self._model.set_aspect_mode(response.aspect_mode)

        self._natural_size = None
        generation = self._model.select_image(image_id, pending)
        _LOGGER.debug("Selected image %s (generation %s)", image_id, generation)
        self._on_cursor_change(None)
        self._emit_crop_changed()
        self._on_request_update()
        return generation

    def on_image_loaded(
        self,
        generation: int,
        natural_width: int,
        natural_height: int,
        container_width: float,
        container_height: float,
    ) -> bool:
        """Report that the image of *generation* finished loading.

        Late reports for an image that is no longer selected are ignored.
        """
        if generation != self._model.generation:
            _LOGGER.debug("Dropping image-loaded report for stale generation %s", generation)
            return False
        self._natural_size = (int(natural_width), int(natural_height))
        self._container_size = (float(container_width), float(container_height))
        return self._apply_bounds()

    def on_container_resized(self, container_width: float, container_height: float) -> bool:
        """Recompute bounds after the rendering container changed size."""
        self._container_size = (float(container_width), float(container_height))
        if self._natural_size is None:
            return False
        return self._apply_bounds()

    def set_aspect_mode(self, mode: AspectMode | str) -> None:
        """Change the aspect lock used by later resizes and later images."""
        self._aspect_mode = AspectMode.parse(mode)
        self._model.set_aspect_mode(self._aspect_mode)

    def reset(self) -> None:
        """Replace the crop with the centred default box."""
        self._remember()
        if self._model.reset_to_default():
            self._emit_crop_changed()
            self._on_request_update()

    def revert(self) -> None:
        """Go back to the last saved crop, or the default when none exists."""
        if not self._model.bounds_ready:
            return
        self._remember()
        self._model.queue_normalized(self._saved_rect)
        self._emit_crop_changed()
        self._on_request_update()

    def apply_suggestion(self, rect: Optional[NormalizedRect], notice: Optional[str] = None) -> None:
        """Show *rect* as the working crop; ``None`` falls back to the default."""
        if notice:
            self._notice(notice, self._model.image_id)
        self._remember()
        self._model.queue_normalized(rect)
        self._emit_crop_changed()
        self._on_request_update()

    def suggest(self, image_ref: str) -> bool:
        """Ask the detector for a crop of *image_ref* and apply the result."""
        if self._suggest is None:
            return False
        response = self._suggest.execute(SuggestCropRequest(
            image_ref=image_ref,
            aspect_mode=self._model.aspect_mode,
            natural_size=self._natural_size,
            max_pct=self._max_suggested_pct,
        ))
        if not response.success:
            self._notice(f"Auto crop failed: {response.error}", self._model.image_id)
            return False
        self.apply_suggestion(response.rect, response.notice)
        return True

    def undo(self) -> bool:
        """Go back to the crop from before the last gesture, reset or suggestion."""
        snapshot, self._undo = self._undo, None
        if snapshot is None or not self._model.restore(snapshot):
            return False
        self._emit_crop_changed()
        self._on_request_update()
        return True

    def save(self) -> bool:
        """Persist the current crop; returns ``True`` on success.

        New gestures are refused while the write is outstanding.  On failure
        the in-memory crop is kept so the user can retry.
        """
        image_id = self._model.image_id
        normalized = self._model.normalized()
        if image_id is None or normalized is None or self._model.is_save_outstanding:
            return False

        self._model.mark_save_started()
        try:
            response = self._save.execute(SaveCropRequest(
                image_id=image_id,
                rect=normalized,
                aspect_mode=self._model.aspect_mode,
                is_automatic=False,
            ))
        finally:
            self._model.mark_save_finished()

        if not response.success:
            self._notice(f"Saving the crop failed: {response.error}", image_id)
            return False
        if response.record is not None:
            self._saved_rect = response.record.rect
        return True

    # ------------------------------------------------------------------
    # Pointer handlers
    # ------------------------------------------------------------------
    def pointer_down(self, point: tuple[float, float]) -> bool:
        """Start a gesture under *point*; returns ``True`` when one started."""
        rect = self._model.rect
        if rect is None or not self._model.bounds_ready:
            return False
        mode = self._hit_tester.test(point, rect)
        if mode is InteractionMode.NONE:
            self._on_cursor_change(Qt.CursorShape.ArrowCursor)
            return False
        snapshot = self._model.snapshot()
        if not self._model.begin_gesture(mode, point):
            return False
        self._undo = snapshot
        if mode is InteractionMode.MOVE:
            self._on_cursor_change(Qt.CursorShape.ClosedHandCursor)
        else:
            self._on_cursor_change(cursor_for_mode(mode))
        return True

    def pointer_move(self, point: tuple[float, float]) -> None:
        """Update the active gesture, or the hover cursor when idle."""
        if not self._model.interaction.is_active:
            rect = self._model.rect
            mode = self._hit_tester.test(point, rect) if rect is not None else InteractionMode.NONE
            self._on_cursor_change(cursor_for_mode(mode))
            return
        if self._model.update_gesture(point) is not None:
            self._emit_crop_changed()
            self._on_request_update()

    def pointer_up(self) -> None:
        """Commit the gesture on pointer release."""
        self._finish_gesture()

    def pointer_leave(self) -> None:
        """Commit the gesture when the pointer leaves the surface."""
        self._finish_gesture()
        self._on_cursor_change(None)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _finish_gesture(self) -> None:
        mode = self._model.interaction.mode
        if self._model.end_gesture() is None:
            return
        _LOGGER.debug("Finished %s gesture on %s", mode.value, self._model.image_id)
        self._on_cursor_change(None)
        self._emit_crop_changed()
        self._on_request_update()

    def _remember(self) -> None:
        if self._model.rect is not None:
            self._undo = self._model.snapshot()

    def _apply_bounds(self) -> bool:
        natural_w, natural_h = self._natural_size or (0, 0)
        container_w, container_h = self._container_size
        bounds = compute_bounds(natural_w, natural_h, container_w, container_h)
        if not self._model.set_bounds(self._model.generation, bounds):
            return False
        self._emit_crop_changed()
        self._on_request_update()
        return True

    def _emit_crop_changed(self) -> None:
        self._on_crop_changed_callback(self._model.normalized())

    def _notice(self, message: str, image_id: Optional[str]) -> None:
        if self._errors is not None:
            self._errors.notice(message, context={"image_id": image_id})
        else:
            _LOGGER.warning(message)
