from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from ..errors import InvalidAspectModeError


class AspectMode(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "4:5"
    FREE = "free"

    @property
    def multiplier(self) -> Optional[float]:
        """Height/width ratio enforced while resizing, ``None`` for free crops."""
        return _MULTIPLIERS[self]

    @property
    def width_ratio(self) -> Optional[float]:
        """Width/height ratio, the inverse of :attr:`multiplier`."""
        multiplier = _MULTIPLIERS[self]
        return None if multiplier is None else 1.0 / multiplier

    @property
    def is_locked(self) -> bool:
        return self is not AspectMode.FREE

    @classmethod
    def parse(cls, value: "AspectMode | str") -> "AspectMode":
        if isinstance(value, AspectMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidAspectModeError(
                f"Unsupported aspect mode {value!r}; expected one of 1:1, 4:5, free"
            ) from exc


_MULTIPLIERS: dict[AspectMode, Optional[float]] = {
    AspectMode.SQUARE: 1.0,
    AspectMode.PORTRAIT: 1.25,
    AspectMode.FREE: None,
}


@dataclass(frozen=True)
class NormalizedRect:
    """Crop rectangle in percentages (0-100) of the natural image size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def rounded(self) -> NormalizedRect:
        """Return the rect snapped to whole percentage points for persistence."""
        return NormalizedRect(
            float(round(self.x)),
            float(round(self.y)),
            float(round(self.width)),
            float(round(self.height)),
        )

    def as_mapping(self) -> dict[str, float]:
        return {
            "crop_x": self.x,
            "crop_y": self.y,
            "crop_width": self.width,
            "crop_height": self.height,
        }

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> NormalizedRect:
        return cls(
            float(values.get("crop_x", 0.0)),
            float(values.get("crop_y", 0.0)),
            float(values.get("crop_width", 0.0)),
            float(values.get("crop_height", 0.0)),
        )


@dataclass
class CropRecord:
    id: str
    image_id: str
    rect: NormalizedRect
    aspect_mode: AspectMode = AspectMode.SQUARE
    is_automatic: bool = True
    cropped_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        image_id: str,
        rect: NormalizedRect,
        aspect_mode: AspectMode = AspectMode.SQUARE,
        is_automatic: bool = True,
    ) -> CropRecord:
        now = datetime.now()
        return cls(
            id=str(uuid.uuid4()),
            image_id=image_id,
            rect=rect,
            aspect_mode=aspect_mode,
            is_automatic=is_automatic,
            created_at=now,
            updated_at=now,
        )

    def updated(self, rect: NormalizedRect, aspect_mode: AspectMode, is_automatic: bool) -> CropRecord:
        return replace(
            self,
            rect=rect,
            aspect_mode=aspect_mode,
            is_automatic=is_automatic,
            updated_at=datetime.now(),
        )


@dataclass(frozen=True)
class FaceBox:
    """Face bounding box in natural image pixels."""
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)


@dataclass(frozen=True)
class FaceDetection:
    box: FaceBox
    confidence: float = 1.0


@dataclass(frozen=True)
class DetectionResult:
    suggested_rect: Optional[NormalizedRect]
    confidence: float = 0.0
    detected: bool = False
    notice: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
