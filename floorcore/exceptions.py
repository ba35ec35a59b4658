"""Custom exception hierarchy for the floor-plan geometry kernel."""

from __future__ import annotations


class FloorCoreError(Exception):
    """Base exception for all floorcore-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(FloorCoreError):
    """Raised when configuration is invalid or missing."""
    pass


class GeometryError(FloorCoreError):
    """Raised when a geometry operation is called with unusable arguments."""
    pass


class ShapeParseError(FloorCoreError):
    """Raised when an editor shape record cannot be turned into a model."""
    pass


class TemplateError(FloorCoreError):
    """Base class for template placement errors."""
    pass


class TemplateNotFoundError(TemplateError):
    """Raised when a template is not found in the cache."""
    pass
