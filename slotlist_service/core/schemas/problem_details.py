"""Error body schemas (RFC 7807, https://datatracker.ietf.org/doc/html/rfc7807)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """Machine-readable error body.

    ``type`` is a short slug such as ``insufficient-permissions`` rather than
    a URI; clients switch on it.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "type": "insufficient-permissions",
                "title": "Forbidden",
                "status": 403,
                "detail": "Forbidden",
                "instance": "/v1/communities/sel/permissions",
            }
        },
    )

    type: str = Field(default="about:blank", min_length=1)
    title: str = Field(min_length=1)
    status: int = Field(ge=400, le=599)
    detail: str | None = None
    instance: str | None = None


class FieldError(BaseModel):
    field: str = Field(description="Dotted location, e.g. body.permission")
    message: str
    type: str
    value: Any | None = None


class ValidationProblemDetails(ProblemDetails):
    errors: list[FieldError] = Field(default_factory=list)


__all__ = ["FieldError", "ProblemDetails", "ValidationProblemDetails"]
