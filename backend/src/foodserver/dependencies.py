from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from foodserver.core.database import get_session
from foodserver.errors import MealError, MealNotFoundError, MealValidationError
from foodserver.services.meal_store import MealStore
from foodserver.storage.photos import PhotoStorage

_LOG = logging.getLogger(__name__)


def get_photo_storage(request: Request) -> PhotoStorage:
    return request.app.state.photos


def get_meal_store(
    session: Session = Depends(get_session),
    photos: PhotoStorage = Depends(get_photo_storage),
) -> MealStore:
    return MealStore(session, photos)


def http_error(exc: MealError) -> HTTPException:
    """Map a domain error onto an HTTPException without leaking backend detail."""
    if isinstance(exc, MealNotFoundError):
        return HTTPException(status.HTTP_404_NOT_FOUND, str(exc))
    if isinstance(exc, MealValidationError):
        return HTTPException(422, str(exc))
    _LOG.error("backend failure: %s", exc)
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
