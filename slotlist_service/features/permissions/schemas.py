"""Pydantic schemas for community permission management."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field, field_validator

from slotlist_service.core.acl import validate_permission_format
from slotlist_service.core.schemas.base import CustomBase, PaginatedResponse


class PermissionUser(CustomBase):
    """User a permission has been granted to."""

    uid: UUID
    nickname: str


class PermissionResponse(CustomBase):
    """Public permission information, as displayed in permission lists."""

    uid: UUID
    permission: str = Field(description="Permission in dotted notation")
    user: PermissionUser


class PermissionCreate(CustomBase):
    """Payload for granting a community permission."""

    user_uid: UUID = Field(..., description="UID of the user receiving the permission")
    permission: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Permission to grant, e.g. 'community.spezialeinheit-luchs.recruitment'",
    )

    @field_validator("permission")
    @classmethod
    def validate_permission(cls, v: str) -> str:
        if not validate_permission_format(v):
            msg = "Permission must consist of non-empty dot-separated segments"
            raise ValueError(msg)
        return v


class PermissionEnvelope(CustomBase):
    permission: PermissionResponse


class PermissionListResponse(PaginatedResponse):
    """Paginated list of a community's permissions."""

    permissions: list[PermissionResponse]


__all__ = [
    "PermissionCreate",
    "PermissionEnvelope",
    "PermissionListResponse",
    "PermissionResponse",
    "PermissionUser",
]
