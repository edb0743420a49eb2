import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .base import UseCase, UseCaseRequest, UseCaseResponse
from ...domain.repositories import ICropRepository
from ...errors import CropStudioError
from ...events.bus import EventBus
from ...events.crop_events import CropDeletedEvent


@dataclass(frozen=True)
class DeleteCropRequest(UseCaseRequest):
    crop_id: str = ""
    image_id: Optional[str] = None


@dataclass(frozen=True)
class DeleteCropResponse(UseCaseResponse):
    pass


class DeleteCropUseCase(UseCase):
    def __init__(self, crop_repo: ICropRepository, event_bus: Optional[EventBus] = None):
        self._crop_repo = crop_repo
        self._events = event_bus
        self._logger = logging.getLogger(__name__)

    def execute(self, request: DeleteCropRequest) -> DeleteCropResponse:
        try:
            self._crop_repo.delete_crop(request.crop_id)
        except CropStudioError as exc:
            self._logger.warning("Deleting crop %s failed: %s", request.crop_id, exc)
            return DeleteCropResponse(success=False, error=str(exc))

        self._logger.info("Deleted crop %s", request.crop_id)
        if self._events is not None:
            self._events.publish(CropDeletedEvent(crop_id=request.crop_id, image_id=request.image_id))
        return DeleteCropResponse(success=True)


@dataclass(frozen=True)
class ResetCropsRequest(UseCaseRequest):
    image_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResetCropsResponse(UseCaseResponse):
    deleted: int = 0


class ResetCropsUseCase(UseCase):
    """Remove every crop for a batch of images."""

    def __init__(self, crop_repo: ICropRepository):
        self._crop_repo = crop_repo
        self._logger = logging.getLogger(__name__)

    def execute(self, request: ResetCropsRequest) -> ResetCropsResponse:
        if not request.image_ids:
            return ResetCropsResponse(success=True, deleted=0)
        try:
            deleted = self._crop_repo.delete_for_images(request.image_ids)
        except CropStudioError as exc:
            self._logger.warning("Resetting crops failed: %s", exc)
            return ResetCropsResponse(success=False, error=str(exc))
        self._logger.info("Reset %d crops across %d images", deleted, len(request.image_ids))
        return ResetCropsResponse(success=True, deleted=deleted)
