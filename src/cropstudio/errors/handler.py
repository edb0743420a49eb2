import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Route recoverable failures to the log, the event bus and the UI.

    The editor never lets an exception escape into the Qt event loop; failed
    saves and detection fallbacks surface through here as notices instead.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]):
        self._ui_callback = callback

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: Optional[dict] = None):
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", error.__class__.__name__, error, extra={"context": context or {}})

        self._events.publish(ErrorOccurredEvent(
            error=error,
            severity=severity,
            context=context or {},
        ))

        if self._ui_callback is not None and severity != ErrorSeverity.INFO:
            try:
                self._ui_callback(str(error), severity)
            except Exception as exc:
                self._logger.error("UI error callback failed: %s", exc)

    def notice(self, message: str, context: Optional[dict] = None):
        """Surface a non-fatal notice such as a detection fallback."""
        self._logger.warning(message, extra={"context": context or {}})
        if self._ui_callback is not None:
            try:
                self._ui_callback(message, ErrorSeverity.WARNING)
            except Exception as exc:
                self._logger.error("UI notice callback failed: %s", exc)
