"""SQLAlchemy models for mission slot templates."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Index, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slotlist_service.core.database import UUIDTimestampedBase

if TYPE_CHECKING:
    from slotlist_service.core.models.user import User


class MissionVisibility(str, Enum):
    """Who may see a template.

    - PUBLIC: everyone, including anonymous visitors
    - HIDDEN / PRIVATE: the creator only
    - COMMUNITY: the creator only, as community membership is not stored
    """

    PUBLIC = "public"
    HIDDEN = "hidden"
    COMMUNITY = "community"
    PRIVATE = "private"


class MissionSlotTemplate(UUIDTimestampedBase):
    """Reusable set of slot groups a mission creator can copy into a mission.

    ``slot_groups`` is stored as JSON exactly as accepted by the API
    (camelCase keys), e.g.
    ``[{"title": "Alpha", "orderNumber": 0, "description": None, "slots": [...]}]``.
    """

    __tablename__ = "mission_slot_templates"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    visibility: Mapped[MissionVisibility] = mapped_column(
        SAEnum(
            MissionVisibility,
            name="mission_visibility",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=MissionVisibility.HIDDEN,
        nullable=False,
    )
    slot_groups: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        default=list,
        nullable=False,
    )
    creator_uid: Mapped[UUID] = mapped_column(
        ForeignKey("users.uid", ondelete="CASCADE"),
        nullable=False,
    )

    creator: Mapped[User] = relationship("User", lazy="selectin")

    __table_args__ = (
        Index("ix_mission_slot_templates_creator_uid", "creator_uid"),
        Index("ix_mission_slot_templates_visibility", "visibility"),
    )

    @property
    def slot_group_count(self) -> int:
        return len(self.slot_groups)

    @property
    def slot_count(self) -> int:
        return sum(len(group.get("slots", [])) for group in self.slot_groups)

    def __repr__(self) -> str:
        return f"<MissionSlotTemplate(uid={self.uid}, title={self.title!r})>"
