"""Application-wide context shared by the CLI and the GUI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .application.interfaces import IFaceDetector
from .application.use_cases import (
    DeleteCropUseCase,
    LoadCropUseCase,
    ResetCropsUseCase,
    SaveCropUseCase,
    SuggestCropUseCase,
)
from .config import DB_FILE_NAME
from .domain.models import AspectMode
from .domain.repositories import ICropRepository
from .errors.handler import ErrorHandler
from .events.bus import Event, EventBus
from .events.crop_events import (
    CropDeletedEvent,
    CropSavedEvent,
    CropSaveFailedEvent,
    SuggestionClampedEvent,
)
from .infrastructure.db.pool import ConnectionPool
from .infrastructure.repositories import SQLiteCropRepository
from .settings.manager import SettingsManager

_LOGGER = logging.getLogger(__name__)

_AUDITED_EVENTS = (CropSavedEvent, CropSaveFailedEvent, CropDeletedEvent, SuggestionClampedEvent)


def _log_crop_event(event: Event) -> None:
    if isinstance(event, CropSaveFailedEvent):
        _LOGGER.warning("Saving crop for %s failed: %s", event.image_id, event.reason)
    else:
        _LOGGER.info("%s: %s", type(event).__name__, event)


def _default_database_path(settings: SettingsManager) -> Path:
    configured = settings.get("storage.database_path")
    if isinstance(configured, str) and configured:
        return Path(configured).expanduser()
    return settings.path.parent / DB_FILE_NAME


@dataclass
class AppContext:
    """Container object wiring repositories, use cases and settings together."""

    settings: SettingsManager
    repository: ICropRepository
    event_bus: EventBus = field(default_factory=EventBus)
    pool: Optional[ConnectionPool] = None
    error_handler: ErrorHandler = field(init=False)
    load_crop: LoadCropUseCase = field(init=False)
    save_crop: SaveCropUseCase = field(init=False)
    delete_crop: DeleteCropUseCase = field(init=False)
    reset_crops: ResetCropsUseCase = field(init=False)

    def __post_init__(self) -> None:
        self.error_handler = ErrorHandler(logging.getLogger("cropstudio.errors"), self.event_bus)
        self.load_crop = LoadCropUseCase(self.repository)
        self.save_crop = SaveCropUseCase(self.repository, self.event_bus)
        self.delete_crop = DeleteCropUseCase(self.repository, self.event_bus)
        self.reset_crops = ResetCropsUseCase(self.repository)
        for event_type in _AUDITED_EVENTS:
            self.event_bus.subscribe(event_type, _log_crop_event)

    @property
    def default_aspect(self) -> AspectMode:
        return AspectMode.parse(self.settings.get("editor.default_aspect", "1:1"))

    @property
    def min_crop_size(self) -> float:
        return float(self.settings.get("editor.min_crop_size"))

    @property
    def hit_padding(self) -> float:
        return float(self.settings.get("editor.hit_padding"))

    @property
    def max_suggested_pct(self) -> float:
        return float(self.settings.get("editor.max_suggested_pct"))

    def suggest_crop(self, detector: IFaceDetector) -> SuggestCropUseCase:
        """Return a suggestion use case for *detector* that can persist results."""
        return SuggestCropUseCase(detector, self.event_bus, self.save_crop)

    def close(self) -> None:
        if self.pool is not None:
            self.pool.close_all()


def create_context(
    settings_path: Optional[Path] = None,
    database_path: Optional[Path] = None,
) -> AppContext:
    """Load settings and open the crop database they point at."""

    settings = SettingsManager(settings_path)
    settings.load()
    db_path = database_path or _default_database_path(settings)
    _LOGGER.info("Using crop database %s", db_path)
    pool = ConnectionPool(db_path)
    repository = SQLiteCropRepository(pool)
    return AppContext(settings=settings, repository=repository, pool=pool)
