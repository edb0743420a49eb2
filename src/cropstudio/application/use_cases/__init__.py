from .base import UseCase, UseCaseRequest, UseCaseResponse
from .delete_crop import (
    DeleteCropRequest,
    DeleteCropResponse,
    DeleteCropUseCase,
    ResetCropsRequest,
    ResetCropsResponse,
    ResetCropsUseCase,
)
from .load_crop import LoadCropRequest, LoadCropResponse, LoadCropUseCase
from .save_crop import SaveCropRequest, SaveCropResponse, SaveCropUseCase
from .suggest_crop import SuggestCropRequest, SuggestCropResponse, SuggestCropUseCase

__all__ = [
    "DeleteCropRequest",
    "DeleteCropResponse",
    "DeleteCropUseCase",
    "LoadCropRequest",
    "LoadCropResponse",
    "LoadCropUseCase",
    "ResetCropsRequest",
    "ResetCropsResponse",
    "ResetCropsUseCase",
    "SaveCropRequest",
    "SaveCropResponse",
    "SaveCropUseCase",
    "SuggestCropRequest",
    "SuggestCropResponse",
    "SuggestCropUseCase",
    "UseCase",
    "UseCaseRequest",
    "UseCaseResponse",
]
