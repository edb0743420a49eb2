"""Natural image size lookup backed by Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

_LOGGER = logging.getLogger(__name__)


def natural_size(path: Path) -> tuple[int, int] | None:
    """Return the EXIF-oriented ``(width, height)`` of *path*, or ``None``.

    Only the header is parsed; pixel data is not decoded.
    """

    try:
        with Image.open(path) as image:
            width, height = image.size
            orientation = image.getexif().get(0x0112, 1)
    except (OSError, UnidentifiedImageError) as exc:
        _LOGGER.warning("Cannot read image size for %s: %s", path, exc)
        return None
    # Orientations 5-8 swap the axes once the transpose is applied.
    if orientation in (5, 6, 7, 8):
        return height, width
    return width, height


def open_oriented(path: Path) -> Image.Image:
    """Open *path* with its EXIF orientation applied."""

    with Image.open(path) as image:
        return ImageOps.exif_transpose(image)
