"""All settings domains behind one object, for code that needs several."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .logs import LoggingSettings


class Settings(BaseSettings):
    """Composition of the per-domain settings.

    Each member still reads its own prefix, so ``Settings().auth`` is the
    same as ``AuthSettings()``. Cross-domain checks live here.
    """

    model_config = SettingsConfigDict(frozen=True, extra="ignore")

    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @model_validator(mode="after")
    def _require_real_secret_in_production(self) -> Settings:
        if self.app.is_production and self.auth.uses_default_secret:
            raise ValueError("JWT_SECRET must be set to a non-default value in production")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
