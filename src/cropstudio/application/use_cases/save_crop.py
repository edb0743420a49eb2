import logging
from dataclasses import dataclass
from typing import Optional

from .base import UseCase, UseCaseRequest, UseCaseResponse
from ...domain.models import AspectMode, CropRecord, NormalizedRect
from ...domain.repositories import ICropRepository
from ...domain.services.normalization import sanitize_normalized
from ...errors import CropStudioError
from ...events.bus import EventBus
from ...events.crop_events import CropSavedEvent, CropSaveFailedEvent


@dataclass(frozen=True)
class SaveCropRequest(UseCaseRequest):
    image_id: str = ""
    rect: Optional[NormalizedRect] = None
    aspect_mode: AspectMode = AspectMode.SQUARE
    is_automatic: bool = False


@dataclass(frozen=True)
class SaveCropResponse(UseCaseResponse):
    record: Optional[CropRecord] = None


class SaveCropUseCase(UseCase):
    """Persist a crop as whole percentage points.

    Repository failures come back as ``success=False`` so the editor can keep
    the user's rectangle and offer a retry.
    """

    def __init__(self, crop_repo: ICropRepository, event_bus: Optional[EventBus] = None):
        self._crop_repo = crop_repo
        self._events = event_bus
        self._logger = logging.getLogger(__name__)

    def execute(self, request: SaveCropRequest) -> SaveCropResponse:
        if request.rect is None:
            return SaveCropResponse(success=False, error="No crop rectangle to save")

        rect = sanitize_normalized(request.rect.rounded())
        try:
            record = self._crop_repo.upsert_crop(
                request.image_id,
                rect,
                request.aspect_mode,
                request.is_automatic,
            )
        except CropStudioError as exc:
            self._logger.warning("Saving crop for %s failed: %s", request.image_id, exc)
            if self._events is not None:
                self._events.publish(CropSaveFailedEvent(image_id=request.image_id, reason=str(exc)))
            return SaveCropResponse(success=False, error=str(exc))

        self._logger.info(
            "Saved crop %s for image %s (%s, automatic=%s)",
            record.id,
            request.image_id,
            request.aspect_mode.value,
            request.is_automatic,
        )
        if self._events is not None:
            self._events.publish(CropSavedEvent(
                image_id=request.image_id,
                crop_id=record.id,
                rect=record.rect,
                aspect_mode=record.aspect_mode,
                is_automatic=record.is_automatic,
            ))
        return SaveCropResponse(success=True, record=record)
