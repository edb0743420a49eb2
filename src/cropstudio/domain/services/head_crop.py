"""Head-and-shoulders framing derived from a face bounding box."""

from __future__ import annotations

from typing import Iterable, Optional

from ...config import (
    BELOW_FACE_FACTOR,
    HEADROOM_FACTOR,
    HORIZONTAL_PADDING_FACTOR,
    MIN_SUGGESTED_SIDE_PCT,
    NO_FACE_MAX_HEIGHT_PCT,
    NO_FACE_TOP_PCT,
    NO_FACE_WIDTH_PCT,
)
from ..models import AspectMode, FaceBox, FaceDetection, NormalizedRect

# Free crops are framed like portrait look shots.
_FREE_WIDTH_RATIO = 0.8


def best_face(detections: Iterable[FaceDetection]) -> Optional[FaceBox]:
    """Return the detection with the highest ``confidence * area`` score."""
    ranked = sorted(
        detections,
        key=lambda detection: detection.confidence * detection.box.area,
        reverse=True,
    )
    return ranked[0].box if ranked else None


def calculate_head_and_shoulders_crop(
    face: Optional[FaceBox],
    image_width: int,
    image_height: int,
    aspect_mode: AspectMode,
) -> NormalizedRect:
    """Expand *face* into a head-and-shoulders crop in percentages.

    The crop keeps a little headroom above the face, extends one and a half
    face heights below it and is centred horizontally on the face.  Without a
    face a portrait-oriented upper crop is returned.
    """

    target_ratio = aspect_mode.width_ratio or _FREE_WIDTH_RATIO

    if face is None or image_width <= 0 or image_height <= 0:
        width = NO_FACE_WIDTH_PCT
        height = min(width / target_ratio, NO_FACE_MAX_HEIGHT_PCT)
        return NormalizedRect((100.0 - width) / 2.0, NO_FACE_TOP_PCT, width, height)

    face_center_x = (face.x + face.width / 2.0) / image_width * 100.0
    face_top = face.y / image_height * 100.0
    face_height = face.height / image_height * 100.0
    face_width = face.width / image_width * 100.0

    top = face_top - face_height * HEADROOM_FACTOR
    width_from_face = face_width * HORIZONTAL_PADDING_FACTOR

    crop_height = face_height * (1.0 + BELOW_FACE_FACTOR) + face_height * HEADROOM_FACTOR
    crop_width = crop_height * target_ratio
    if crop_width < width_from_face:
        crop_width = width_from_face
        crop_height = crop_width / target_ratio

    crop_x = face_center_x - crop_width / 2.0
    crop_y = max(0.0, top)

    if crop_x < 0.0:
        crop_x = 0.0
    if crop_x + crop_width > 100.0:
        crop_x = 100.0 - crop_width
        if crop_x < 0.0:
            crop_x = 0.0
            crop_width = 100.0
            crop_height = crop_width / target_ratio

    if crop_y + crop_height > 100.0:
        crop_height = 100.0 - crop_y
        crop_width = crop_height * target_ratio
        crop_x = face_center_x - crop_width / 2.0
        crop_x = max(0.0, crop_x)
        if crop_x + crop_width > 100.0:
            crop_x = 100.0 - crop_width

    return NormalizedRect(
        max(0.0, min(100.0, crop_x)),
        max(0.0, min(100.0, crop_y)),
        max(MIN_SUGGESTED_SIDE_PCT, min(100.0, crop_width)),
        max(MIN_SUGGESTED_SIDE_PCT, min(100.0, crop_height)),
    )
