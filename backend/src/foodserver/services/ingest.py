from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from foodserver.errors import MealValidationError
from foodserver.models.meals import Meal
from foodserver.services.meal_store import validate_meal

PHOTO_CONTENT_TYPE = "image/jpeg"


@dataclass(frozen=True)
class FormPart:
    field: str
    body: Union[str, bytes]  # str for text parts, bytes for file parts
    content_type: Optional[str] = None


@dataclass(frozen=True)
class IngestResult:
    meal: Optional[Meal] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.meal is not None


def _reject(reason: str) -> IngestResult:
    return IngestResult(error=reason)


def ingest_form(parts: Sequence[FormPart]) -> IngestResult:
    """
    Build a Meal from positional form parts: name, rating, photo.

    Field names are ignored, only the order counts. The photo part must be
    raw bytes sent as image/jpeg. Nothing is raised; a rejected form comes
    back with `error` set and `meal` None.
    """
    if len(parts) < 3:
        return _reject(f"expected 3 form parts, got {len(parts)}")

    name_part, rating_part, photo_part = parts[0], parts[1], parts[2]
    if not isinstance(name_part.body, str):
        return _reject("part 1 (name) must be text")
    if not isinstance(rating_part.body, str):
        return _reject("part 2 (rating) must be text")
    try:
        rating = int(rating_part.body.strip())
    except ValueError:
        return _reject(f"rating {rating_part.body!r} is not an integer")
    if not isinstance(photo_part.body, bytes):
        return _reject("part 3 (photo) must be a file")
    if photo_part.content_type != PHOTO_CONTENT_TYPE:
        return _reject(f"photo content type must be {PHOTO_CONTENT_TYPE}, got {photo_part.content_type}")

    meal = Meal(name=name_part.body, rating=rating, photo=photo_part.body)
    try:
        validate_meal(meal)
    except MealValidationError as exc:
        return _reject(str(exc))
    return IngestResult(meal=meal)
