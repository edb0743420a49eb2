"""Interactive crop box editor drawn over a contain-fit image."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPainterPath, QPaintEvent, QPen, QPixmap, QResizeEvent
from PySide6.QtWidgets import QWidget

from ...application.use_cases.load_crop import LoadCropUseCase
from ...application.use_cases.save_crop import SaveCropUseCase
from ...application.use_cases.suggest_crop import SuggestCropUseCase
from ...config import HANDLE_HIT_PADDING_PX, HANDLE_SIZE_PX, MAX_SUGGESTED_PCT, MIN_CROP_SIZE_PX
from ...domain.models import AspectMode, NormalizedRect
from ...editor.controller import CropInteractionController
from ...errors.handler import ErrorHandler

_LOGGER = logging.getLogger(__name__)

_BACKGROUND = QColor("#1e1e1e")
_MASK = QColor(0, 0, 0, 140)
_BORDER = QColor(255, 255, 255)
_GUIDE = QColor(255, 255, 255, 90)


class CropEditorWidget(QWidget):
    """Render surface for :class:`CropInteractionController`."""

    cropChanged = Signal(object)
    saveFinished = Signal(bool)

    def __init__(
        self,
        *,
        load_use_case: LoadCropUseCase,
        save_use_case: SaveCropUseCase,
        suggest_use_case: Optional[SuggestCropUseCase] = None,
        error_handler: Optional[ErrorHandler] = None,
        aspect_mode: AspectMode = AspectMode.SQUARE,
        min_size: float = MIN_CROP_SIZE_PX,
        hit_padding: float = HANDLE_HIT_PADDING_PX,
        max_suggested_pct: float = MAX_SUGGESTED_PCT,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setMinimumSize(200, 200)

        self._pixmap: Optional[QPixmap] = None
        self._image_ref: Optional[str] = None
        self._controller = CropInteractionController(
            load_use_case=load_use_case,
            save_use_case=save_use_case,
            suggest_use_case=suggest_use_case,
            error_handler=error_handler,
            on_crop_changed=self._on_crop_changed,
            on_cursor_change=self._on_cursor_change,
            on_request_update=self.update,
            aspect_mode=aspect_mode,
            min_size=min_size,
            hit_padding=hit_padding,
            max_suggested_pct=max_suggested_pct,
        )

    @property
    def controller(self) -> CropInteractionController:
        return self._controller

    # ------------------------------------------------------------------
    # Image selection
    # ------------------------------------------------------------------
    def set_image(self, image_id: Optional[str], pixmap: Optional[QPixmap], image_ref: Optional[str] = None) -> int:
        """Show *pixmap* for *image_id* and return the selection generation."""
        generation = self._controller.select_image(image_id)
        self._image_ref = image_ref
        if pixmap is None or pixmap.isNull():
            self._pixmap = None
            self.update()
            return generation
        self._pixmap = pixmap
        self._controller.on_image_loaded(
            generation,
            pixmap.width(),
            pixmap.height(),
            self.width(),
            self.height(),
        )
        self.update()
        return generation

    def load_image(self, image_id: str, path: Path) -> bool:
        """Load *path* from disk and show it for *image_id*."""
        pixmap = QPixmap(str(path))
        if pixmap.isNull():
            _LOGGER.warning("Could not load image %s", path)
            self.set_image(image_id, None)
            return False
        self.set_image(image_id, pixmap, image_ref=str(path))
        return True

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def set_aspect_mode(self, mode: AspectMode | str) -> None:
        self._controller.set_aspect_mode(mode)

    def reset_crop(self) -> None:
        self._controller.reset()

    def revert_crop(self) -> None:
        self._controller.revert()

    def undo_crop(self) -> bool:
        return self._controller.undo()

    def suggest_crop(self) -> bool:
        if self._image_ref is None:
            return False
        return self._controller.suggest(self._image_ref)

    def save_crop(self) -> bool:
        ok = self._controller.save()
        self.saveFinished.emit(ok)
        return ok

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        if self._controller.pointer_down((pos.x(), pos.y())):
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        pos = event.position()
        self._controller.pointer_move((pos.x(), pos.y()))
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.pointer_up()
        event.accept()

    def leaveEvent(self, event) -> None:  # noqa: N802
        self._controller.pointer_leave()
        super().leaveEvent(event)

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        size = event.size()
        self._controller.on_container_resized(size.width(), size.height())

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        del event  # unused
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), _BACKGROUND)

        bounds = self._controller.model.bounds
        if self._pixmap is None or not self._controller.model.bounds_ready:
            painter.end()
            return

        target = QRectF(bounds.offset_x, bounds.offset_y, bounds.width, bounds.height)
        painter.drawPixmap(target, self._pixmap, QRectF(self._pixmap.rect()))

        crop = self._controller.current_rect()
        if crop is not None:
            self._paint_crop_overlay(painter, target, QRectF(crop.x, crop.y, crop.width, crop.height))
        painter.end()

    # ------------------------------------------------------------------
    # Painting helpers
    # ------------------------------------------------------------------
    def _paint_crop_overlay(self, painter: QPainter, image_rect: QRectF, crop_rect: QRectF) -> None:
        mask = QPainterPath()
        mask.setFillRule(Qt.FillRule.OddEvenFill)
        mask.addRect(image_rect)
        mask.addRect(crop_rect)
        painter.fillPath(mask, _MASK)

        guide_pen = QPen(_GUIDE)
        guide_pen.setWidthF(1.0)
        painter.setPen(guide_pen)
        for step in (1.0 / 3.0, 2.0 / 3.0):
            x = crop_rect.left() + crop_rect.width() * step
            y = crop_rect.top() + crop_rect.height() * step
            painter.drawLine(QPointF(x, crop_rect.top()), QPointF(x, crop_rect.bottom()))
            painter.drawLine(QPointF(crop_rect.left(), y), QPointF(crop_rect.right(), y))

        border_pen = QPen(_BORDER)
        border_pen.setWidthF(1.5)
        painter.setPen(border_pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(crop_rect)

        half = HANDLE_SIZE_PX / 2.0
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(_BORDER)
        for corner in (crop_rect.topLeft(), crop_rect.topRight(), crop_rect.bottomLeft(), crop_rect.bottomRight()):
            painter.drawRect(QRectF(corner.x() - half, corner.y() - half, HANDLE_SIZE_PX, HANDLE_SIZE_PX))

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------
    def _on_crop_changed(self, rect: Optional[NormalizedRect]) -> None:
        self.cropChanged.emit(rect)

    def _on_cursor_change(self, cursor: Optional[Qt.CursorShape]) -> None:
        if cursor is None:
            self.unsetCursor()
        else:
            self.setCursor(cursor)
