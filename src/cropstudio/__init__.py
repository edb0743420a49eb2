"""CropStudio: crop-box editing for look and talent imagery."""

__version__ = "0.1.0"
