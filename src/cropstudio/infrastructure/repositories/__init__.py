from .memory_crop_repository import InMemoryCropRepository
from .sqlite_crop_repository import SQLiteCropRepository

__all__ = ["InMemoryCropRepository", "SQLiteCropRepository"]
