"""Domain errors raised by the meal store, the aggregator and form ingestion."""

from __future__ import annotations

from typing import Optional


class MealError(Exception):
    pass


class MealValidationError(MealError):
    """Malformed or missing meal input, raised before anything is written."""


class MealNotFoundError(MealError):
    def __init__(self, name: str):
        super().__init__(f"Meal '{name}' not found")
        self.name = name


class StorageError(MealError):
    """A backend (database or filesystem) failed."""


class RecordStoreError(StorageError):
    pass


class StoreUnavailableError(StorageError):
    pass


class PhotoStoreError(StorageError):
    # record_saved tells the caller the row was committed but the photo is missing.
    def __init__(self, message: str, record_saved: bool = False, path: Optional[str] = None):
        super().__init__(message)
        self.record_saved = record_saved
        self.path = path
