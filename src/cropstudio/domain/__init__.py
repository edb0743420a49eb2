from .models import (
    AspectMode,
    CropRecord,
    DetectionResult,
    FaceBox,
    FaceDetection,
    NormalizedRect,
)
from .repositories import ICropRepository

__all__ = [
    "AspectMode",
    "CropRecord",
    "DetectionResult",
    "FaceBox",
    "FaceDetection",
    "ICropRepository",
    "NormalizedRect",
]
