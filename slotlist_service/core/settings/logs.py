"""LOG_* settings: level, output format and where records go."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Logging settings.

    JSON Lines go to stdout by default; set ``LOG_JSON=false`` for plain
    text during local development, ``LOG_FILE_ENABLED=true`` to also write a
    rotating file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        env_ignore_empty=True,
    )

    service_name: str = "slotlist-service"
    level: LogLevel = "INFO"
    json_logs: bool = Field(default=True, validation_alias=AliasChoices("log_json", "json_logs"))

    console_enabled: bool = True
    file_enabled: bool = False
    file_path: Path = Path("logs/slotlist-service.log.jsonl")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    file_backup_count: int = Field(default=5, ge=0, le=100)

    include_context: bool = Field(
        default=True,
        description="Copy request_id, client_ip and user_uid from the log context onto records",
    )
    capture_warnings: bool = True
    include_uvicorn: bool = True

    include_request_id: bool = True
    log_slow_requests: bool = True
    slow_request_threshold: float = Field(default=1.0, ge=0.1, le=60.0, description="Seconds")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @computed_field
    @property
    def effective_file_path(self) -> Path | None:
        return self.file_path if self.file_enabled else None

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        path = self.effective_file_path
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "file_path": str(path) if path else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "console_enabled": self.console_enabled,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
            "include_uvicorn": self.include_uvicorn,
        }
