"""Base schema classes for API payloads and responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_LIMIT = 25
MAX_LIMIT = 100


class CustomBase(BaseModel):
    """Base model with common configuration for all API schemas.

    Field names are snake_case in Python and camelCase on the wire;
    either spelling is accepted on input.

    Example:
        class AnnouncementResponse(CustomBase):
            uid: UUID
            visible_from: datetime | None   # serialized as "visibleFrom"
    """

    model_config = ConfigDict(
        # Allow creation from ORM models (SQLAlchemy)
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        # Ignore extra fields (silently drop unexpected data)
        extra="ignore",
    )


class SuccessResponse(BaseModel):
    """Plain acknowledgement, e.g. for deletions."""

    success: bool = Field(default=True)


class PaginatedResponse(CustomBase):
    """Pagination envelope shared by list endpoints."""

    limit: int = Field(description="Page size used for this request")
    offset: int = Field(description="Number of skipped entries")
    count: int = Field(description="Number of entries in this page")
    total: int = Field(description="Number of entries across all pages")
    more_available: bool = Field(description="Whether another page follows")
