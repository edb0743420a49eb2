"""Custom exception hierarchy for CropStudio."""

from __future__ import annotations


class CropStudioError(Exception):
    """Base class for all custom errors raised by CropStudio."""


# --- 3-layer hierarchy ---

class DomainError(CropStudioError):
    """Base class for domain-level errors."""


class InfrastructureError(CropStudioError):
    """Base class for infrastructure-level errors."""


class ApplicationError(CropStudioError):
    """Base class for application-level errors."""


# --- Domain errors ---

class InvalidAspectModeError(DomainError, ValueError):
    """Raised when an aspect mode string is not one of 1:1, 4:5 or free."""


class BoundsNotReadyError(DomainError):
    """Raised when a coordinate conversion is attempted on degenerate bounds."""


class CropNotFoundError(DomainError):
    """Raised when the requested crop record cannot be located."""


# --- Infrastructure errors ---

class DatabaseError(InfrastructureError):
    """Raised when a database operation fails."""


class ConnectionPoolExhausted(InfrastructureError):
    """Raised when no connections are available in the pool."""


class CropPersistenceError(InfrastructureError):
    """Raised when a crop record cannot be written or removed."""


class DetectionError(InfrastructureError):
    """Raised when the face detection collaborator fails."""


# --- Application errors ---

class ExportError(ApplicationError):
    """Raised when a cropped output image cannot be rendered or written."""


class SettingsError(CropStudioError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
