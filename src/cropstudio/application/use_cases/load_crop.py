import logging
from dataclasses import dataclass
from typing import Optional

from .base import UseCase, UseCaseRequest, UseCaseResponse
from ...domain.models import AspectMode, CropRecord, NormalizedRect
from ...domain.repositories import ICropRepository
from ...domain.services.normalization import sanitize_normalized
from ...errors import CropStudioError


@dataclass(frozen=True)
class LoadCropRequest(UseCaseRequest):
    image_id: str = ""


@dataclass(frozen=True)
class LoadCropResponse(UseCaseResponse):
    rect: Optional[NormalizedRect] = None
    aspect_mode: Optional[AspectMode] = None
    record: Optional[CropRecord] = None


class LoadCropUseCase(UseCase):
    def __init__(self, crop_repo: ICropRepository):
        self._crop_repo = crop_repo
        self._logger = logging.getLogger(__name__)

    def execute(self, request: LoadCropRequest) -> LoadCropResponse:
        try:
            record = self._crop_repo.get_crop(request.image_id)
        except CropStudioError as exc:
            self._logger.warning("Loading crop for %s failed: %s", request.image_id, exc)
            return LoadCropResponse(success=False, error=str(exc))

        if record is None:
            return LoadCropResponse(success=True)

        rect = sanitize_normalized(record.rect)
        if rect != record.rect:
            self._logger.warning(
                "Crop %s for image %s was out of range %s; clamped to %s",
                record.id,
                request.image_id,
                record.rect,
                rect,
            )
        return LoadCropResponse(
            success=True,
            rect=rect,
            aspect_mode=record.aspect_mode,
            record=record,
        )
