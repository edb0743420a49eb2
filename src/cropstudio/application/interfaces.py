from abc import ABC, abstractmethod

from ..domain.models import AspectMode, DetectionResult


class IFaceDetector(ABC):
    """Interface for the auto-detection collaborator."""

    @abstractmethod
    def detect(self, image_ref: str, aspect_mode: AspectMode) -> DetectionResult:
        """
        Suggest a crop for the image at *image_ref* (a path or URL).
        The suggestion is expressed in percentages of the natural image size.
        """
        pass
