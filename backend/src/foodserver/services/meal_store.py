"""
Meal persistence: one database row plus one photo file per meal.

The two writes are not one transaction. `create` stages the photo first,
commits the row, then moves the photo into place:

- staging fails  -> PhotoStoreError, nothing written
- commit fails   -> RecordStoreError, staged file removed, old photo untouched
- move fails     -> PhotoStoreError(record_saved=True), row is committed

`delete` removes the row only; the photo file stays on disk.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from foodserver.errors import MealNotFoundError, MealValidationError, RecordStoreError
from foodserver.models.meals import MAX_RATING, MIN_RATING, Meal
from foodserver.storage.photos import PhotoStorage, check_photo_name

_LOG = logging.getLogger(__name__)


def validate_meal(meal: Meal) -> None:
    if not isinstance(meal.name, str):
        raise MealValidationError("name must be a string")
    check_photo_name(meal.name)
    if isinstance(meal.rating, bool) or not isinstance(meal.rating, int):
        raise MealValidationError("rating must be an integer")
    if not MIN_RATING <= meal.rating <= MAX_RATING:
        raise MealValidationError(f"rating must be between {MIN_RATING} and {MAX_RATING}")
    if not isinstance(meal.photo, (bytes, bytearray)):
        raise MealValidationError("photo must be raw bytes")


class MealStore:
    def __init__(self, session: Session, photos: PhotoStorage):
        self.session = session
        self.photos = photos

    def create(self, meal: Meal) -> Meal:
        validate_meal(meal)
        staged = self.photos.stage(bytes(meal.photo))
        try:
            stored = self.session.merge(meal)
            self.session.commit()
            self.session.refresh(stored)
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.photos.discard(staged)
            _LOG.error("saving meal %r failed", meal.name, exc_info=True)
            raise RecordStoreError(f"could not save meal {meal.name!r}") from exc
        self.photos.commit(staged, stored.name, record_saved=True)
        _LOG.info("stored meal %r (rating=%d, %d photo bytes)", stored.name, stored.rating, len(stored.photo))
        return stored

    def find_all(self) -> List[Meal]:
        try:
            return list(self.session.exec(select(Meal)).all())
        except SQLAlchemyError as exc:
            _LOG.error("listing meals failed", exc_info=True)
            raise RecordStoreError("could not load meals") from exc

    def get(self, name: str) -> Meal:
        try:
            meal = self.session.get(Meal, name)
        except SQLAlchemyError as exc:
            _LOG.error("loading meal %r failed", name, exc_info=True)
            raise RecordStoreError(f"could not load meal {name!r}") from exc
        if meal is None:
            raise MealNotFoundError(name)
        return meal

    def delete(self, name: str) -> None:
        meal = self.get(name)
        try:
            self.session.delete(meal)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            _LOG.error("deleting meal %r failed", name, exc_info=True)
            raise RecordStoreError(f"could not delete meal {name!r}") from exc
        _LOG.info("deleted meal %r, photo kept", name)
