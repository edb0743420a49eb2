from .crop_editor import CropEditorWidget

__all__ = ["CropEditorWidget"]
