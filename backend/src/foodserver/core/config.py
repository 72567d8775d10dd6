from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


BACKEND_ROOT = Path(__file__).resolve().parents[3]
ENV_PATH = BACKEND_ROOT / ".env"

# Load environment variables as early as possible so Settings picks them up.
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FOODSERVER_",
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "FoodServer API"
    app_version: str = "0.1.0"
    docs_url: str = "/docs"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8080

    # Either a complete SQLAlchemy URL or the individual parts below.
    database_url: Optional[str] = None
    db_driver: str = "postgresql+psycopg2"
    db_host: Optional[str] = None
    db_port: int = 5432
    db_name: str = "FoodDatabase"
    db_user: Optional[str] = None
    db_password: Optional[str] = None
    database_echo: bool = False

    pool_min_size: int = 10
    pool_max_size: int = 50
    pool_timeout: float = 10.0

    photo_root: Path = BACKEND_ROOT / "public"
    surface_ingest_errors: bool = False

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        if self.db_host:
            return URL.create(
                self.db_driver,
                username=self.db_user,
                password=self.db_password,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            ).render_as_string(hide_password=False)
        return f"sqlite:///{(BACKEND_ROOT / 'foodserver.db').as_posix()}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
