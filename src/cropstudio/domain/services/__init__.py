from .head_crop import best_face, calculate_head_and_shoulders_crop
from .normalization import (
    clamp_suggestion,
    default_normalized,
    sanitize_normalized,
)

__all__ = [
    "best_face",
    "calculate_head_and_shoulders_crop",
    "clamp_suggestion",
    "default_normalized",
    "sanitize_normalized",
]
