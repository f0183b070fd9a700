"""Pydantic schemas for mission slot templates."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from slotlist_service.core.schemas.base import CustomBase, PaginatedResponse
from slotlist_service.features.slot_templates.models import MissionVisibility


class SlotTemplateSlot(CustomBase):
    """Single slot inside a slot group."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Platoon Lead"])
    description: str | None = Field(default=None, min_length=1, description="Short description")
    detailed_description: str | None = Field(default=None, min_length=1, description="May contain HTML")
    difficulty: int = Field(..., ge=0, le=4, description="0 (easiest) to 4 (hardest)")
    order_number: int = Field(..., ge=0, description="Sort order within the group")
    blocked: bool = Field(..., description="Nobody can register for a blocked slot")
    reserve: bool = Field(..., description="Only assigned once every regular slot is filled")


class SlotTemplateSlotGroup(CustomBase):
    title: str = Field(..., min_length=1, max_length=255, examples=['Rifle Squad "Luchs"'])
    order_number: int = Field(..., ge=0)
    description: str | None = Field(default=None, min_length=1)
    slots: list[SlotTemplateSlot] = Field(default_factory=list)


class SlotTemplateCreator(CustomBase):
    uid: UUID
    nickname: str


class SlotTemplateResponse(CustomBase):
    """Template summary, as shown in lists."""

    uid: UUID
    title: str
    slot_group_count: int
    slot_count: int
    visibility: MissionVisibility
    creator: SlotTemplateCreator


class SlotTemplateDetailsResponse(SlotTemplateResponse):
    slot_groups: list[SlotTemplateSlotGroup]


class SlotTemplateCreate(CustomBase):
    title: str = Field(..., min_length=1, max_length=255)
    visibility: MissionVisibility = MissionVisibility.HIDDEN
    slot_groups: list[SlotTemplateSlotGroup] = Field(default_factory=list)


class SlotTemplateUpdate(CustomBase):
    """Partial update; ``slotGroups`` replaces the full list when given."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    visibility: MissionVisibility | None = None
    slot_groups: list[SlotTemplateSlotGroup] | None = None


class SlotTemplateEnvelope(CustomBase):
    slot_template: SlotTemplateDetailsResponse


class SlotTemplateListResponse(PaginatedResponse):
    slot_templates: list[SlotTemplateResponse]


__all__ = [
    "SlotTemplateCreate",
    "SlotTemplateCreator",
    "SlotTemplateDetailsResponse",
    "SlotTemplateEnvelope",
    "SlotTemplateListResponse",
    "SlotTemplateResponse",
    "SlotTemplateSlot",
    "SlotTemplateSlotGroup",
    "SlotTemplateUpdate",
]
