from .head_crop_detector import FaceProvider, HeadAndShouldersDetector

__all__ = ["FaceProvider", "HeadAndShouldersDetector"]
