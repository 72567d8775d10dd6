from __future__ import annotations

import logging
from typing import Iterable

from foodserver.errors import StorageError, StoreUnavailableError
from foodserver.models.meals import MAX_RATING, MIN_RATING, Meal, MealRating, Summary
from foodserver.services.meal_store import MealStore

_LOG = logging.getLogger(__name__)


def summarize_meals(meals: Iterable[Meal]) -> Summary:
    """Count, mean, min/max and a per-rating histogram over `meals`."""
    meals = list(meals)
    ratings = [m.rating for m in meals]
    histogram = {r: 0 for r in range(MIN_RATING, MAX_RATING + 1)}
    for r in ratings:
        histogram[r] = histogram.get(r, 0) + 1

    if not ratings:
        return Summary(count=0, histogram=histogram)

    return Summary(
        count=len(meals),
        average_rating=round(sum(ratings) / len(ratings), 2),
        min_rating=min(ratings),
        max_rating=max(ratings),
        histogram=histogram,
        meals=[MealRating(name=m.name, rating=m.rating) for m in meals],
    )


def summarize(store: MealStore) -> Summary:
    try:
        meals = store.find_all()
    except StorageError as exc:
        _LOG.error("summary unavailable: %s", exc)
        raise StoreUnavailableError("meal store unavailable") from exc
    return summarize_meals(meals)
