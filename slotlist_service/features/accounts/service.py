"""Service layer for account lookup and token refresh."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from slotlist_service.core.exceptions import UnauthorizedException
from slotlist_service.features.accounts.repository import (
    PermissionRepository,
    UserRepository,
    get_permission_repository,
    get_user_repository,
)

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from slotlist_service.core.models import User
    from slotlist_service.infra.auth.jwt import JWTCodec

logger = logging.getLogger(__name__)


class AccountService:
    """Resolve token users against the store and re-issue tokens."""

    def __init__(
        self,
        session: AsyncSession,
        users: UserRepository | None = None,
        permissions: PermissionRepository | None = None,
    ) -> None:
        self._session = session
        self._users = users or get_user_repository()
        self._permissions = permissions or get_permission_repository()

    async def get_account(self, uid: UUID) -> tuple[User, list[str]]:
        """Load an active user and their stored permission strings.

        Raises:
            UnauthorizedException: If the user is unknown or deactivated
        """
        user = await self._users.get_active(self._session, uid)
        if user is None:
            logger.info("User from decoded token not found", extra={"user_uid": str(uid)})
            raise UnauthorizedException(detail="Token user not found", type="token-user-not-found")

        grants = await self._permissions.list_for_user(self._session, uid)
        return user, list(grants)

    async def update_account(self, uid: UUID, *, nickname: str | None) -> tuple[User, list[str]]:
        """Apply changes to the caller's mutable account details.

        The token keeps the old nickname until it is refreshed.
        """
        user, grants = await self.get_account(uid)
        if nickname is not None and nickname != user.nickname:
            logger.info(
                "Account nickname changed",
                extra={"user_uid": str(uid), "old_nickname": user.nickname, "nickname": nickname},
            )
            user.nickname = nickname
            await self._session.flush()
        return user, grants

    async def refresh_token(self, uid: UUID, codec: JWTCodec) -> str:
        """Issue a new token carrying the permissions currently stored.

        Grants added or revoked since the old token was issued take
        effect in the new one.
        """
        user, grants = await self.get_account(uid)
        token = codec.issue(user.uid, user.nickname, grants)
        logger.info(
            "Token refreshed",
            extra={"user_uid": str(user.uid), "permission_count": len(grants)},
        )
        return token
