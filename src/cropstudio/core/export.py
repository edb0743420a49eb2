"""Render a persisted crop out of its source image."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..config import EXPORT_JPEG_QUALITY, EXPORT_OUTPUT_SIZE
from ..domain.models import NormalizedRect
from ..domain.services.normalization import sanitize_normalized
from ..editor.geometry import normalized_to_pixels
from ..errors import ExportError
from ..utils.image_info import open_oriented

_LOGGER = logging.getLogger(__name__)

_JPEG_SUFFIXES = {".jpg", ".jpeg"}


def get_unique_destination(destination: Path) -> Path:
    """Return *destination* or a variant with a counter if it exists."""
    if not destination.exists():
        return destination

    parent = destination.parent
    stem = destination.stem
    suffix = destination.suffix
    counter = 1
    while True:
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def render_crop(image: Image.Image, rect: NormalizedRect, output_size: int = EXPORT_OUTPUT_SIZE) -> Image.Image:
    """Cut *rect* out of *image* and scale it so the output is *output_size* wide.

    The height follows the crop's own proportions, so a 1:1 crop yields a
    square and a 4:5 crop a portrait output.
    """

    if output_size <= 0:
        raise ExportError(f"output size must be positive, got {output_size}")
    width, height = image.size
    left, top, box_w, box_h = normalized_to_pixels(sanitize_normalized(rect), width, height)
    cropped = image.crop((left, top, left + box_w, top + box_h))

    out_height = max(1, int(round(output_size * box_h / box_w)))
    return cropped.resize((output_size, out_height), Image.Resampling.LANCZOS)


def export_crop(
    source: Path,
    rect: NormalizedRect,
    destination: Path,
    output_size: int = EXPORT_OUTPUT_SIZE,
    *,
    overwrite: bool = False,
) -> Path:
    """Write the crop of *source* described by *rect* to *destination*.

    Returns the path actually written; without *overwrite* an existing file
    gets a numbered sibling instead.
    """

    try:
        image = open_oriented(Path(source))
    except (OSError, UnidentifiedImageError) as exc:
        raise ExportError(f"Cannot read {source}: {exc}") from exc
    rendered = render_crop(image, rect, output_size)

    target = destination if overwrite else get_unique_destination(destination)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.suffix.lower() in _JPEG_SUFFIXES:
            if rendered.mode != "RGB":
                rendered = rendered.convert("RGB")
            rendered.save(target, quality=EXPORT_JPEG_QUALITY)
        else:
            rendered.save(target)
    except (OSError, ValueError) as exc:
        raise ExportError(f"Cannot write {target}: {exc}") from exc

    _LOGGER.info("Exported crop of %s to %s (%dx%d)", source, target, *rendered.size)
    return target
