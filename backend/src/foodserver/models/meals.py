import base64
import binascii
from typing import Dict, List, Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

MIN_RATING = 0
MAX_RATING = 5


class MealBase(SQLModel):
    name: str
    rating: int


class Meal(MealBase, table=True):
    # The name doubles as the photo file name, see storage.photos.
    name: str = Field(primary_key=True)
    photo: bytes
    rating: int


class MealPayload(MealBase):
    """JSON shape of a meal; the photo travels as standard base64."""

    photo: str

    @field_validator("photo")
    @classmethod
    def photo_is_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("photo must be base64 encoded") from exc
        return value

    def to_meal(self) -> Meal:
        return Meal(name=self.name, rating=self.rating, photo=base64.b64decode(self.photo))

    @classmethod
    def from_meal(cls, meal: Meal) -> "MealPayload":
        return cls(
            name=meal.name,
            rating=meal.rating,
            photo=base64.b64encode(meal.photo).decode("ascii"),
        )


class MealRating(SQLModel):
    name: str
    rating: int


class Summary(SQLModel):
    count: int = 0
    average_rating: Optional[float] = None
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None
    histogram: Dict[int, int] = Field(default_factory=dict)
    meals: List[MealRating] = Field(default_factory=list)
