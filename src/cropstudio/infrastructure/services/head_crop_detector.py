"""Auto-detection adapter that frames the best detected face."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from ...application.interfaces import IFaceDetector
from ...domain.models import AspectMode, DetectionResult, FaceDetection
from ...domain.services.head_crop import best_face, calculate_head_and_shoulders_crop
from ...errors import DetectionError
from ...utils.image_info import natural_size

_LOGGER = logging.getLogger(__name__)

FaceProvider = Callable[[str], Sequence[FaceDetection]]
SizeProvider = Callable[[str], Optional[tuple[int, int]]]


def _local_size(image_ref: str) -> Optional[tuple[int, int]]:
    return natural_size(Path(image_ref))


class HeadAndShouldersDetector(IFaceDetector):
    """Turn face boxes from an external face service into crop suggestions.

    Parameters
    ----------
    face_provider:
        Callable returning face detections (natural pixels) for an image
        reference.  The face model itself lives outside this project.
    size_provider:
        Callable returning the natural ``(width, height)`` of the image.
        Defaults to reading the file header with Pillow.
    """

    def __init__(self, face_provider: FaceProvider, size_provider: Optional[SizeProvider] = None):
        self._face_provider = face_provider
        self._size_provider = size_provider or _local_size

    def detect(self, image_ref: str, aspect_mode: AspectMode) -> DetectionResult:
        try:
            size = self._size_provider(image_ref)
            if size is None:
                raise DetectionError(f"Cannot determine image size for {image_ref}")
            detections = list(self._face_provider(image_ref))
        except DetectionError:
            raise
        except Exception as exc:
            raise DetectionError(f"Face detection failed for {image_ref}: {exc}") from exc
        width, height = size

        face = best_face(detections)
        rect = calculate_head_and_shoulders_crop(face, width, height, aspect_mode)
        if face is None:
            _LOGGER.info("No face found in %s; using portrait framing", image_ref)
            return DetectionResult(
                suggested_rect=rect,
                confidence=0.0,
                detected=False,
                notice="No face detected; suggested a portrait framing",
            )

        confidence = max(d.confidence for d in detections if d.box == face)
        return DetectionResult(suggested_rect=rect, confidence=confidence, detected=True)
