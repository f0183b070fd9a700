"""DB_* settings.

Production runs on PostgreSQL through psycopg; local runs and the test
suite point ``DB_URL`` at SQLite through aiosqlite.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Engine URL and pool sizing.

    ``DB_URL`` wins when set; otherwise the URL is assembled from
    ``DB_HOST``, ``DB_PORT``, ``DB_USER``, ``DB_PASSWORD`` and ``DB_NAME``.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        extra="ignore",
        frozen=True,
        env_ignore_empty=True,
    )

    enabled: bool = Field(default=True, description="False answers database routes with 503")
    create_tables: bool = Field(default=False, description="Run create_all on startup")

    url: str | None = None
    host: str = "localhost"
    port: int = Field(default=5432, ge=1, le=65535)
    user: str = "slotlist"
    password: SecretStr = SecretStr("slotlist")
    name: str = "slotlist"
    driver: str = "psycopg"
    application_name: str = "slotlist-service"

    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=100)
    pool_pre_ping: bool = True
    pool_timeout: float = Field(default=30.0, gt=0)
    pool_recycle: int = Field(default=1800, ge=0)
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.get_sqlalchemy_url().startswith("sqlite")

    def get_sqlalchemy_url(self) -> str:
        if self.url:
            return self.url
        credentials = f"{self.user}:{quote_plus(self.password.get_secret_value())}"
        return (
            f"postgresql+{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"
            f"?application_name={quote_plus(self.application_name)}"
        )

    def engine_kwargs(self) -> dict[str, Any]:
        """Options for ``create_async_engine``; SQLite gets no pool sizing."""
        if self.is_sqlite:
            return {"echo": self.echo}
        return {
            "echo": self.echo,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": self.pool_pre_ping,
            "pool_timeout": self.pool_timeout,
            "pool_recycle": self.pool_recycle,
        }
