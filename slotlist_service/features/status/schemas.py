"""Schemas for the status endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field

STATUS_RUNNING = "running"


class StatusResponse(BaseModel):
    """Liveness information about the running API."""

    status: str = Field(default=STATUS_RUNNING, description="Current API status")
    version: str = Field(description="Deployed API version")
    now: int = Field(description="Current server time as UNIX timestamp (seconds)")
    pong: str | None = Field(default=None, description="Echo of the `ping` query parameter")
