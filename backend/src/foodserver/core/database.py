from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from .config import Settings


def _sqlite_connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        # Required for SQLite when used with FastAPI in threaded servers.
        return {"check_same_thread": False}
    return {}


def _pool_args(url: str, settings: Settings) -> dict:
    """Translate min/max/timeout pool bounds into QueuePool arguments."""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.pool_min_size,
        "max_overflow": max(0, settings.pool_max_size - settings.pool_min_size),
        "pool_timeout": settings.pool_timeout,
    }


def create_db_engine(settings: Settings) -> Engine:
    url = settings.resolved_database_url
    return create_engine(
        url,
        echo=settings.database_echo,
        connect_args=_sqlite_connect_args(url),
        **_pool_args(url, settings),
    )


def init_db(engine: Engine) -> None:
    # Import models so SQLModel sees the metadata.
    from foodserver import models  # noqa: F401  (import for side effect)

    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
