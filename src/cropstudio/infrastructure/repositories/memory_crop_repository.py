import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from ...domain.models import AspectMode, CropRecord, NormalizedRect
from ...domain.repositories import ICropRepository
from ...errors import CropNotFoundError


class InMemoryCropRepository(ICropRepository):
    """Process-local crop store keyed by image id."""

    def __init__(self):
        self._by_image: Dict[str, CropRecord] = {}
        self._lock = threading.Lock()

    def get_crop(self, image_id: str) -> Optional[CropRecord]:
        with self._lock:
            return self._by_image.get(image_id)

    def upsert_crop(
        self,
        image_id: str,
        rect: NormalizedRect,
        aspect_mode: AspectMode,
        is_automatic: bool,
    ) -> CropRecord:
        with self._lock:
            existing = self._by_image.get(image_id)
            if existing is None:
                record = CropRecord.create(image_id, rect, aspect_mode, is_automatic)
            else:
                record = existing.updated(rect, aspect_mode, is_automatic)
            self._by_image[image_id] = record
            return record

    def delete_crop(self, crop_id: str) -> None:
        with self._lock:
            for image_id, record in self._by_image.items():
                if record.id == crop_id:
                    del self._by_image[image_id]
                    return
        raise CropNotFoundError(f"Crop {crop_id} not found")

    def list_crops(self, image_ids: Iterable[str]) -> List[CropRecord]:
        with self._lock:
            return [self._by_image[i] for i in image_ids if i in self._by_image]

    def delete_for_images(self, image_ids: Iterable[str]) -> int:
        deleted = 0
        with self._lock:
            for image_id in image_ids:
                if self._by_image.pop(image_id, None) is not None:
                    deleted += 1
        return deleted

    def set_cropped_url(self, crop_id: str, url: str) -> None:
        with self._lock:
            for image_id, record in self._by_image.items():
                if record.id == crop_id:
                    self._by_image[image_id] = replace(record, cropped_url=url)
                    return
        raise CropNotFoundError(f"Crop {crop_id} not found")
