from contextlib import suppress
from typing import AsyncIterator, Callable, Iterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlmodel import Session

from foodserver.core.config import Settings
from foodserver.core.database import create_db_engine, init_db
from foodserver.main import create_app
from foodserver.services.meal_store import MealStore
from foodserver.storage.photos import PhotoStorage


@pytest.fixture
def settings(tmp_path) -> Settings:
    # Fresh SQLite file and photo root per test for isolation
    return Settings(
        database_url=f"sqlite:///{(tmp_path / 'test.db').as_posix()}",
        photo_root=tmp_path / "public",
    )


@pytest.fixture
def app_factory(settings: Settings) -> Iterator[Callable[..., FastAPI]]:
    apps = []

    def _make(**overrides) -> FastAPI:
        app = create_app(settings.model_copy(update=overrides))
        # ASGITransport does not run the lifespan; do its startup work here.
        init_db(app.state.engine)
        app.state.photos.ensure_root()
        apps.append(app)
        return app

    yield _make

    for app in apps:
        with suppress(Exception):
            app.state.engine.dispose()


@pytest.fixture
def test_app(app_factory) -> FastAPI:
    return app_factory()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def photos(settings: Settings) -> PhotoStorage:
    storage = PhotoStorage(settings.photo_root)
    storage.ensure_root()
    return storage


@pytest.fixture
def store(settings: Settings, photos: PhotoStorage) -> Iterator[MealStore]:
    engine = create_db_engine(settings)
    init_db(engine)
    try:
        with Session(engine) as session:
            yield MealStore(session, photos)
    finally:
        engine.dispose()
