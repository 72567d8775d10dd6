from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from foodserver.dependencies import get_meal_store, http_error
from foodserver.errors import MealError, StorageError
from foodserver.services.ingest import FormPart, IngestResult, ingest_form
from foodserver.services.meal_store import MealStore

_LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/foodtracker", tags=["foodtracker"])

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "web" / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


async def _form_parts(request: Request) -> List[FormPart]:
    form = await request.form()
    parts: List[FormPart] = []
    for field, value in form.multi_items():
        if isinstance(value, UploadFile):
            parts.append(FormPart(field, await value.read(), value.content_type))
        else:
            parts.append(FormPart(field, value))
    return parts


@router.get("", response_class=HTMLResponse)
def gallery(request: Request, store: MealStore = Depends(get_meal_store)):
    try:
        meals = store.find_all()
    except MealError as exc:
        raise http_error(exc) from exc
    context = {"meals": [{"name": m.name, "rating": m.rating} for m in meals]}
    return templates.TemplateResponse(request, "foodtracker.html", context)


@router.post("")
async def submit_meal(request: Request, store: MealStore = Depends(get_meal_store)):
    """
    Accept a meal from the gallery form and redirect back to the gallery.

    Rejected forms are dropped without telling the submitter unless
    `surface_ingest_errors` is enabled, in which case they get a 422.
    """
    redirect = RedirectResponse("/foodtracker", status_code=status.HTTP_303_SEE_OTHER)
    surface = request.app.state.settings.surface_ingest_errors

    try:
        parts = await _form_parts(request)
    except (StarletteHTTPException, MultiPartException) as exc:
        # Starlette wraps parser failures in a 400; treat them as a rejected form.
        reason = getattr(exc, "detail", None) or getattr(exc, "message", str(exc))
        result = IngestResult(error=f"malformed form body: {reason}")
    else:
        result = ingest_form(parts)
    if not result.ok:
        _LOG.info("form submission dropped: %s", result.error)
        if surface:
            raise HTTPException(422, result.error)
        return redirect

    try:
        await run_in_threadpool(store.create, result.meal)
    except StorageError as exc:
        _LOG.warning("form submission for %r not stored: %s", result.meal.name, exc)
        if surface:
            raise http_error(exc) from exc
    return redirect
