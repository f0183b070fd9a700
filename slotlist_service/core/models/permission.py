"""Permission model: one stored grant string per row."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slotlist_service.core.database import UUIDTimestampedBase

if TYPE_CHECKING:
    from .user import User


class Permission(UUIDTimestampedBase):
    """A single grant held by a user (e.g. ``community.sel.leader``).

    The set of a user's rows is the grant list embedded in issued tokens.
    """

    __tablename__ = "permissions"

    user_uid: Mapped[UUID] = mapped_column(
        ForeignKey("users.uid", ondelete="CASCADE"),
        nullable=False,
    )
    permission: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Permission in dotted notation",
    )

    user: Mapped[User] = relationship("User", back_populates="permissions", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_uid", "permission", name="uq_permissions_user_uid_permission"),
        Index("ix_permissions_permission", "permission"),
    )

    def __repr__(self) -> str:
        return f"<Permission(uid={self.uid}, user_uid={self.user_uid}, permission={self.permission!r})>"
