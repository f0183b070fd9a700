"""User model: the owner of stored permission grants."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slotlist_service.core.database import UUIDTimestampedBase

if TYPE_CHECKING:
    from .permission import Permission


class User(UUIDTimestampedBase):
    """Registered user.

    Only the fields needed to issue tokens and list grants are mapped;
    inactive users can no longer refresh their tokens.
    """

    __tablename__ = "users"

    nickname: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    permissions: Mapped[list[Permission]] = relationship(
        "Permission",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_users_nickname", "nickname"),)

    @property
    def permission_strings(self) -> list[str]:
        return [p.permission for p in self.permissions]

    def __repr__(self) -> str:
        return f"<User(uid={self.uid}, nickname={self.nickname!r})>"
