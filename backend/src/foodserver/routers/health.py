from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

_LOG = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health(request: Request):
    try:
        with request.app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        _LOG.warning("health check: database unreachable", exc_info=True)
        return JSONResponse({"status": "DOWN"}, status_code=503)
    return {"status": "UP"}
