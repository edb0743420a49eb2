"""Events published over the crop lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.models import AspectMode, NormalizedRect
from .bus import Event


@dataclass(kw_only=True)
class CropSavedEvent(Event):
    image_id: str
    crop_id: str
    rect: NormalizedRect
    aspect_mode: AspectMode
    is_automatic: bool


@dataclass(kw_only=True)
class CropSaveFailedEvent(Event):
    image_id: str
    reason: str


@dataclass(kw_only=True)
class CropDeletedEvent(Event):
    crop_id: str
    image_id: Optional[str] = None


@dataclass(kw_only=True)
class SuggestionClampedEvent(Event):
    """Published when a detector suggestion was replaced or shrunk."""
    original: Optional[NormalizedRect]
    accepted: NormalizedRect
    notice: str
