"""JWT authentication settings."""

from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-slotlist-development-secret"


class AuthSettings(BaseSettings):
    """JSON Web Token settings.

    Environment variables use JWT_ prefix.
    Example: JWT_SECRET=..., JWT_EXPIRES_IN_SECONDS=259200
    """

    secret: SecretStr = Field(
        default=SecretStr(DEFAULT_JWT_SECRET),
        description="Shared secret used to sign and verify tokens",
    )
    algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        min_length=1,
        description="Accepted signing algorithms, the first one is used for issuing",
    )
    audience: str = Field(
        default="https://api.slotlist.info",
        min_length=1,
        description="Expected and issued 'aud' claim",
    )
    issuer: str = Field(
        default="https://api.slotlist.info",
        min_length=1,
        description="Expected and issued 'iss' claim",
    )
    expires_in_seconds: int = Field(
        default=3 * 24 * 60 * 60,
        ge=60,
        le=30 * 24 * 60 * 60,
        description="Lifetime of issued tokens in seconds (default: 3 days)",
    )
    leeway_seconds: int = Field(
        default=0,
        ge=0,
        le=300,
        description="Clock skew tolerance when validating exp/nbf",
    )
    header_schemes: list[str] = Field(
        default_factory=lambda: ["JWT", "Bearer"],
        min_length=1,
        description="Accepted Authorization header schemes",
    )

    @field_validator("header_schemes", mode="after")
    @classmethod
    def normalize_schemes(cls, v: list[str]) -> list[str]:
        return [scheme.strip().lower() for scheme in v if scheme.strip()]

    @property
    def signing_algorithm(self) -> str:
        return self.algorithms[0]

    @property
    def uses_default_secret(self) -> bool:
        return self.secret.get_secret_value() == DEFAULT_JWT_SECRET

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
