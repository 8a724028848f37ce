"""
Error types shared by the data-access layer, services and routes.
"""
from typing import Optional


class StorageError(Exception):
    """Backend data store failure, carries the driver message."""

    def __init__(self, message: str, relation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.relation = relation


class SchemaMismatch(StorageError):
    """A table or view does not exist in this deployment.

    Recoverable: callers substitute a computed value instead of failing.
    """

    def __init__(self, relation: str, message: Optional[str] = None):
        super().__init__(message or f'relation "{relation}" does not exist', relation=relation)


class NotFoundError(StorageError):
    """A single-row fetch returned no rows."""

    def __init__(self, entity: str, identifier=None):
        detail = f"{entity} not found"
        super().__init__(detail, relation=None)
        self.entity = entity
        self.identifier = identifier


class TripValidationError(ValueError):
    """Client-side validation failure (dates, duration, required fields, uploads)."""


class InvalidDateRange(TripValidationError):
    """End date falls before the start date."""


class DurationExceeded(UserWarning):
    """Trip span is longer than the maximum number of planned days."""


class PlacesError(Exception):
    """Places search backend failure."""
