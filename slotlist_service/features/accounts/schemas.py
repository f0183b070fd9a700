"""Pydantic schemas for the account endpoints."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from slotlist_service.core.schemas.base import CustomBase


class AccountResponse(CustomBase):
    """The calling user with the permissions currently stored for them."""

    uid: UUID
    nickname: str
    active: bool
    permissions: list[str] = Field(default_factory=list)


class AccountEnvelope(CustomBase):
    user: AccountResponse


class AccountUpdate(CustomBase):
    """Mutable account details; omitted fields stay unchanged."""

    nickname: str | None = Field(default=None, min_length=1, max_length=255, description="New nickname")
