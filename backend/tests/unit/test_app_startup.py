import pytest

from foodserver.core.config import Settings
from foodserver.main import create_app


def _settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{(tmp_path / 'test.db').as_posix()}",
        photo_root=tmp_path / "public",
    )


def test_building_the_app_does_not_touch_the_photo_root(tmp_path):
    app = create_app(_settings(tmp_path))
    try:
        assert not (tmp_path / "public").exists()
    finally:
        app.state.engine.dispose()


@pytest.mark.asyncio
async def test_startup_creates_the_photo_root(tmp_path):
    app = create_app(_settings(tmp_path))
    async with app.router.lifespan_context(app):
        assert (tmp_path / "public").is_dir()
