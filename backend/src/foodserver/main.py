from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.requests import Request

from foodserver.core.config import Settings, get_settings
from foodserver.core.database import create_db_engine, init_db
from foodserver.core.logs import configure_logging
from foodserver.core.metrics import MetricsRegistry, route_label
from foodserver.routers import foodtracker, health, meals, metrics
from foodserver.storage.photos import PhotoStorage

_LOG = logging.getLogger(__name__)

CORE_ROUTERS = (
    (health.router, {"tags": ["health"]}),
    (meals.router, {}),
    (foodtracker.router, {}),
    (metrics.router, {"tags": ["metrics"]}),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(app.state.engine)
    app.state.photos.ensure_root()
    _LOG.info("database ready, photos in %s", app.state.photos.root)
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url,
        lifespan=lifespan,
    )

    # One engine (and connection pool) per application, shared by all requests.
    application.state.settings = settings
    application.state.engine = create_db_engine(settings)
    application.state.photos = PhotoStorage(settings.photo_root)
    application.state.metrics = MetricsRegistry()

    @application.middleware("http")
    async def enforce_utf8_json(request: Request, call_next):
        response = await call_next(request)
        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    @application.middleware("http")
    async def record_metrics(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            registry = request.app.state.metrics
            route = route_label(request.scope)
            elapsed_ms = (time.perf_counter() - started) * 1000
            registry.counter(
                "http_requests_total", method=request.method, route=route, status=str(status_code)
            ).inc()
            registry.histogram("http_request_duration_ms", method=request.method, route=route).observe(elapsed_ms)

    @application.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=204)

    for router, include_kwargs in CORE_ROUTERS:
        application.include_router(router, **include_kwargs)

    application.mount("/images", StaticFiles(directory=str(settings.photo_root), check_dir=False), name="images")

    @application.get("/", include_in_schema=False)
    def root():
        target = settings.docs_url or "/docs"
        return RedirectResponse(target)

    return application


app = create_app()
