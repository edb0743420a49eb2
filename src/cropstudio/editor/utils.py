"""
Qt helpers for the crop editor that do not belong in the pure geometry.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

from .geometry import InteractionMode


def cursor_for_mode(mode: InteractionMode) -> Qt.CursorShape:
    """Return the cursor shape shown over (or while dragging) *mode*."""
    return {
        InteractionMode.RESIZE_NW: Qt.CursorShape.SizeFDiagCursor,
        InteractionMode.RESIZE_SE: Qt.CursorShape.SizeFDiagCursor,
        InteractionMode.RESIZE_NE: Qt.CursorShape.SizeBDiagCursor,
        InteractionMode.RESIZE_SW: Qt.CursorShape.SizeBDiagCursor,
        InteractionMode.MOVE: Qt.CursorShape.OpenHandCursor,
    }.get(mode, Qt.CursorShape.ArrowCursor)
