"""Default configuration values for CropStudio."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Crop editor geometry
# ---------------------------------------------------------------------------

# Screen-space floor for either side of the crop box.  Resize gestures never
# shrink the box below this regardless of where the pointer goes.
MIN_CROP_SIZE_PX: Final[float] = 30.0

# A fresh crop covers this fraction of the shorter rendered image side.
DEFAULT_CROP_FRACTION: Final[float] = 0.6

# Corner handles react to pointers within this radius (screen pixels).
HANDLE_HIT_PADDING_PX: Final[float] = 12.0
HANDLE_SIZE_PX: Final[int] = 10

# ---------------------------------------------------------------------------
# Auto-detection policy
# ---------------------------------------------------------------------------

# Detector suggestions larger than this percentage of the image in either
# dimension are scaled down and re-centred before being accepted.
MAX_SUGGESTED_PCT: Final[float] = 48.0
MAX_SUGGESTED_PCT_RANGE: Final[tuple[float, float]] = (48.0, 55.0)

# Head-and-shoulders framing around a detected face.
HEADROOM_FACTOR: Final[float] = 0.15
BELOW_FACE_FACTOR: Final[float] = 1.5
HORIZONTAL_PADDING_FACTOR: Final[float] = 1.3
NO_FACE_WIDTH_PCT: Final[float] = 70.0
NO_FACE_TOP_PCT: Final[float] = 5.0
NO_FACE_MAX_HEIGHT_PCT: Final[float] = 90.0
MIN_SUGGESTED_SIDE_PCT: Final[float] = 10.0

# ---------------------------------------------------------------------------
# Storage and export
# ---------------------------------------------------------------------------

DB_FILE_NAME: Final[str] = "cropstudio.db"
CROPS_TABLE: Final[str] = "face_crops"
EXPORT_OUTPUT_SIZE: Final[int] = 1000
EXPORT_JPEG_QUALITY: Final[int] = 92

SETTINGS_SCHEMA_ID: Final[str] = "cropstudio/settings@1"
LOG_LEVEL_ENV: Final[str] = "CROPSTUDIO_LOG_LEVEL"
