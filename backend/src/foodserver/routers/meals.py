from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status

from foodserver.dependencies import get_meal_store, http_error
from foodserver.errors import MealError
from foodserver.models.meals import MealPayload, Summary
from foodserver.services.meal_store import MealStore
from foodserver.services.summary import summarize

router = APIRouter(tags=["meals"])


@router.post("/meals", response_model=MealPayload, status_code=status.HTTP_201_CREATED)
def store_meal(payload: MealPayload, store: MealStore = Depends(get_meal_store)):
    """Save a meal and write its photo to `<photo_root>/<name>.jpg`."""
    try:
        meal = store.create(payload.to_meal())
    except MealError as exc:
        raise http_error(exc) from exc
    return MealPayload.from_meal(meal)


@router.get("/meals", response_model=List[MealPayload])
def load_meals(store: MealStore = Depends(get_meal_store)):
    try:
        meals = store.find_all()
    except MealError as exc:
        raise http_error(exc) from exc
    return [MealPayload.from_meal(m) for m in meals]


@router.get("/summary", response_model=Summary)
def meal_summary(store: MealStore = Depends(get_meal_store)):
    try:
        return summarize(store)
    except MealError as exc:
        raise http_error(exc) from exc


@router.delete("/meal/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal(name: str, store: MealStore = Depends(get_meal_store)):
    """Remove the meal record. The photo file is left in place."""
    try:
        store.delete(name)
    except MealError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
