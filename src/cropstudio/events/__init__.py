from .bus import Event, EventBus, Subscription
from .crop_events import (
    CropDeletedEvent,
    CropSavedEvent,
    CropSaveFailedEvent,
    SuggestionClampedEvent,
)

__all__ = [
    "CropDeletedEvent",
    "CropSaveFailedEvent",
    "CropSavedEvent",
    "Event",
    "EventBus",
    "Subscription",
    "SuggestionClampedEvent",
]
