"""GUI entry point for the crop editor."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QApplication

from ..appctx import AppContext
from ..application.interfaces import IFaceDetector
from .main_window import CropEditorWindow


def run_editor(
    context: AppContext,
    image_path: Path,
    image_id: str,
    detector: Optional[IFaceDetector] = None,
    argv: list[str] | None = None,
) -> int:
    """Open *image_path* in the editor and return the Qt exit code."""

    app = QApplication.instance() or QApplication(list(sys.argv if argv is None else argv))
    window = CropEditorWindow(context, detector)
    window.show()
    window.open_image(image_id, image_path)
    return app.exec()
