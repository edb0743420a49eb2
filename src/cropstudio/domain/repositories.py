from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .models import AspectMode, CropRecord, NormalizedRect


class ICropRepository(ABC):
    """Data-access boundary for persisted crop rectangles."""

    @abstractmethod
    def get_crop(self, image_id: str) -> Optional[CropRecord]:
        """Return the crop stored for *image_id*, if any."""
        pass

    @abstractmethod
    def upsert_crop(
        self,
        image_id: str,
        rect: NormalizedRect,
        aspect_mode: AspectMode,
        is_automatic: bool,
    ) -> CropRecord:
        """Insert or update the single crop row belonging to *image_id*."""
        pass

    @abstractmethod
    def delete_crop(self, crop_id: str) -> None:
        """Delete crop by ID"""
        pass

    @abstractmethod
    def list_crops(self, image_ids: Iterable[str]) -> List[CropRecord]:
        """Return crops for the given images (missing images are skipped)."""
        pass

    @abstractmethod
    def delete_for_images(self, image_ids: Iterable[str]) -> int:
        """Remove every crop belonging to *image_ids*, returning the row count."""
        pass

    @abstractmethod
    def set_cropped_url(self, crop_id: str, url: str) -> None:
        """Record where the rendered output of *crop_id* was stored."""
        pass
