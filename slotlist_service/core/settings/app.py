"""APP_* settings: HTTP surface of the service."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """Settings for the FastAPI app, its server and its middleware.

    Example:
        APP_API_PREFIX=/v1 APP_CORS_ORIGINS='["https://slotlist.info"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        extra="ignore",
        frozen=True,
        env_ignore_empty=True,
    )

    service_name: str = Field(default="slotlist-service", pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$")
    title: str = "slotlist.info API"
    description: str = "Community, mission and slotlist backend with permission-based access control"
    version: str = Field(default="1.0.0", pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$")
    environment: Environment = "development"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    api_prefix: str = Field(default="/v1", pattern=r"^/")

    docs_url: str | None = "/docs"
    redoc_url: str | None = "/redoc"
    openapi_url: str | None = "/openapi.json"
    disable_docs: bool = False

    # Empty list leaves CORS middleware out entirely
    cors_origins: list[str] = Field(default_factory=list)
    cors_allow_credentials: bool = True
    cors_max_age: int = Field(default=3600, ge=0, le=86400)

    # 0 disables Strict-Transport-Security
    hsts_max_age: int = Field(default=31_536_000, ge=0, le=63_072_000)
    hsts_preload: bool = True

    trust_cf_connecting_ip: bool = Field(
        default=False,
        description="Take the client address from CF-Connecting-IP (deployments behind Cloudflare)",
    )

    enable_request_size_limit: bool = True
    request_size_limit: int = Field(default=2 * 1024 * 1024, ge=1024, le=100 * 1024 * 1024)

    @model_validator(mode="after")
    def _no_debug_in_production(self) -> AppSettings:
        if self.is_production and self.debug:
            raise ValueError("Debug mode cannot be enabled in production environment")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_docs_url(self) -> str | None:
        return None if self.disable_docs else self.docs_url

    def get_redoc_url(self) -> str | None:
        return None if self.disable_docs else self.redoc_url

    def get_openapi_url(self) -> str | None:
        return None if self.disable_docs else self.openapi_url

    def hsts_header(self) -> str | None:
        """Strict-Transport-Security value, or None when HSTS is off."""
        if not self.hsts_max_age:
            return None
        parts = [f"max-age={self.hsts_max_age}", "includeSubDomains"]
        if self.hsts_preload:
            parts.append("preload")
        return "; ".join(parts)
