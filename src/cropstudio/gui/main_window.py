"""Top-level window hosting the crop editor."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QComboBox, QMainWindow, QToolBar

from ..appctx import AppContext
from ..application.interfaces import IFaceDetector
from ..domain.models import AspectMode, NormalizedRect
from ..errors.handler import ErrorSeverity
from ..events.crop_events import CropSavedEvent
from .widgets.crop_editor import CropEditorWidget

_LOGGER = logging.getLogger(__name__)


class CropEditorWindow(QMainWindow):
    """Editor window with aspect selection, auto crop, undo and save actions."""

    def __init__(self, context: AppContext, detector: Optional[IFaceDetector] = None) -> None:
        super().__init__()
        self.setWindowTitle("CropStudio")
        self.resize(960, 720)
        self._context = context

        suggest = context.suggest_crop(detector) if detector is not None else None
        self.editor = CropEditorWidget(
            load_use_case=context.load_crop,
            save_use_case=context.save_crop,
            suggest_use_case=suggest,
            error_handler=context.error_handler,
            aspect_mode=context.default_aspect,
            min_size=context.min_crop_size,
            hit_padding=context.hit_padding,
            max_suggested_pct=context.max_suggested_pct,
            parent=self,
        )
        self.setCentralWidget(self.editor)

        toolbar = QToolBar("Crop", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.aspect_combo = QComboBox(toolbar)
        for mode in AspectMode:
            self.aspect_combo.addItem(mode.value, mode)
        self.aspect_combo.setCurrentIndex(list(AspectMode).index(context.default_aspect))
        self.aspect_combo.currentIndexChanged.connect(self._on_aspect_selected)
        toolbar.addWidget(self.aspect_combo)

        self.auto_action = QAction("Auto", self)
        self.auto_action.setEnabled(suggest is not None)
        self.auto_action.triggered.connect(self.editor.suggest_crop)
        toolbar.addAction(self.auto_action)

        reset_action = QAction("Reset", self)
        reset_action.triggered.connect(self.editor.reset_crop)
        toolbar.addAction(reset_action)

        revert_action = QAction("Revert", self)
        revert_action.triggered.connect(self.editor.revert_crop)
        toolbar.addAction(revert_action)

        undo_action = QAction("Undo", self)
        undo_action.setShortcut(QKeySequence.StandardKey.Undo)
        undo_action.triggered.connect(self.editor.undo_crop)
        toolbar.addAction(undo_action)

        save_action = QAction("Save", self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.triggered.connect(self.editor.save_crop)
        toolbar.addAction(save_action)

        self.editor.cropChanged.connect(self._on_crop_changed)
        context.error_handler.register_ui_callback(self._show_notice)
        self._saved_subscription = context.event_bus.subscribe(CropSavedEvent, self._on_crop_saved)

    def open_image(self, image_id: str, path: Path) -> bool:
        ok = self.editor.load_image(image_id, path)
        self._sync_aspect_combo()
        return ok

    def _sync_aspect_combo(self) -> None:
        mode = self.editor.controller.model.aspect_mode
        self.aspect_combo.blockSignals(True)
        self.aspect_combo.setCurrentIndex(list(AspectMode).index(mode))
        self.aspect_combo.blockSignals(False)

    def _on_aspect_selected(self, index: int) -> None:
        mode = self.aspect_combo.itemData(index)
        if mode is not None:
            self.editor.set_aspect_mode(mode)

    def _on_crop_changed(self, rect: Optional[NormalizedRect]) -> None:
        if rect is None:
            self.statusBar().clearMessage()
            return
        rounded = rect.rounded()
        self.statusBar().showMessage(
            f"x {rounded.x:g}%  y {rounded.y:g}%  w {rounded.width:g}%  h {rounded.height:g}%"
        )

    def _on_crop_saved(self, event: CropSavedEvent) -> None:
        if event.image_id != self.editor.controller.model.image_id:
            return
        rect = event.rect
        self.statusBar().showMessage(
            f"Saved crop for {event.image_id}: x {rect.x:g}%  y {rect.y:g}%  w {rect.width:g}%  h {rect.height:g}%",
            3000,
        )

    def closeEvent(self, event) -> None:  # noqa: N802
        self._context.event_bus.unsubscribe(self._saved_subscription)
        super().closeEvent(event)

    def _show_notice(self, message: str, severity: ErrorSeverity) -> None:
        _LOGGER.debug("Showing %s notice: %s", severity.value, message)
        self.statusBar().showMessage(message, 6000)
