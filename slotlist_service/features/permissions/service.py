"""Service layer for community permission management.

Community leaders and founders manage the ``community.<slug>.*`` grants
of their own community:

- ``leader`` and ``recruitment`` may be granted through the API
- granting or revoking ``leader`` additionally requires the founder grant
- ``founder`` is never granted nor revoked through the API

The affected user receives a notification for every grant and revocation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from slotlist_service.core.acl import CommunityRole, PermissionChecker, community_permission
from slotlist_service.core.database import NotFoundError
from slotlist_service.core.exceptions import (
    ConflictException,
    ForbiddenException,
    ValidationException,
)
from slotlist_service.core.models import Permission
from slotlist_service.features.accounts.repository import (
    PermissionRepository,
    UserRepository,
    get_permission_repository,
    get_user_repository,
)
from slotlist_service.features.notifications import NotificationService, NotificationType
from slotlist_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from slotlist_service.core.database import SearchResult
    from slotlist_service.core.schemas.auth import AuthUser

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

GRANTABLE_ROLES = frozenset({CommunityRole.LEADER, CommunityRole.RECRUITMENT})


def community_prefix(slug: str) -> str:
    """Prefix shared by every permission of a community."""
    return community_permission(slug, "")


def _permission_exists(permission: str) -> ConflictException:
    return ConflictException(
        detail="Permission already exists",
        type="permission-exists",
        extra={"permission": permission},
    )


class CommunityPermissionService:
    """Grant, list and revoke community-scoped permissions."""

    def __init__(
        self,
        session: AsyncSession,
        repo: PermissionRepository | None = None,
        users: UserRepository | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self._session = session
        self._repo = repo or get_permission_repository()
        self._users = users or get_user_repository()
        self._notifications = notifications or NotificationService(session)

    async def list_permissions(
        self,
        slug: str,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[Permission]:
        result = await self._repo.search_by_prefix(
            self._session, community_prefix(slug), limit=limit, offset=offset
        )
        lazy_logger.debug(
            lambda: f"service.list_permissions({slug!r}) -> {len(result.items)}/{result.total}"
        )
        return result

    def _role_of(self, slug: str, permission: str) -> CommunityRole | None:
        prefix = community_prefix(slug)
        if not permission.startswith(prefix):
            return None
        try:
            return CommunityRole(permission[len(prefix):])
        except ValueError:
            return None

    def _require_founder(self, actor: AuthUser, slug: str, action: str) -> None:
        founder = community_permission(slug, CommunityRole.FOUNDER)
        if not PermissionChecker(actor).has_all(founder):
            logger.info(
                "User tried to manage leader permission without founder permission",
                extra={"user_uid": str(actor.uid), "community_slug": slug, "action": action},
            )
            raise ForbiddenException(
                detail="Only the community founder can manage leader permissions",
                type="founder-required",
            )

    async def grant_permission(
        self,
        actor: AuthUser,
        slug: str,
        user_uid: UUID,
        permission: str,
    ) -> Permission:
        """Grant a community permission to a user.

        Raises:
            ValidationException: If the permission is not grantable for this community
            ForbiddenException: If granting ``leader`` without the founder grant
            NotFoundError: If the target user doesn't exist
            ConflictException: If the user already holds the permission
        """
        role = self._role_of(slug, permission)
        if role not in GRANTABLE_ROLES:
            raise ValidationException(
                detail="Permission cannot be granted for this community",
                type="invalid-permission",
                extra={"permission": permission},
            )
        if role is CommunityRole.LEADER:
            self._require_founder(actor, slug, "grant")

        target = await self._users.get(self._session, user_uid)
        if target is None:
            raise NotFoundError("User", {"uid": str(user_uid)})

        if await self._repo.get_grant(self._session, user_uid, permission) is not None:
            raise _permission_exists(permission)

        try:
            created = await self._repo.create(
                self._session, Permission(user_uid=user_uid, user=target, permission=permission)
            )
        except IntegrityError as exc:
            # A concurrent request stored the same grant after our lookup
            await self._session.rollback()
            logger.info(
                "Concurrent duplicate permission grant rejected",
                extra={"permission": permission, "target_user_uid": str(user_uid)},
            )
            raise _permission_exists(permission) from exc

        logger.info(
            "Community permission granted",
            extra={
                "community_slug": slug,
                "permission": permission,
                "target_user_uid": str(user_uid),
                "user_uid": str(actor.uid),
            },
        )
        await self._notify(NotificationType.COMMUNITY_PERMISSION_GRANTED, user_uid, slug, permission)
        return created

    async def revoke_permission(self, actor: AuthUser, slug: str, permission_uid: UUID) -> None:
        """Revoke a community permission.

        Raises:
            NotFoundError: If no such permission exists in this community
            ForbiddenException: If revoking ``founder``, or ``leader`` without the founder grant
        """
        grant = await self._repo.get(self._session, permission_uid)
        role = self._role_of(slug, grant.permission) if grant is not None else None
        if grant is None or role is None:
            raise NotFoundError("Permission", {"uid": str(permission_uid)})

        if role is CommunityRole.FOUNDER:
            raise ForbiddenException(
                detail="Founder permission cannot be revoked",
                type="founder-permission-immutable",
            )
        if role is CommunityRole.LEADER:
            self._require_founder(actor, slug, "revoke")

        await self._repo.delete(self._session, grant)
        logger.info(
            "Community permission revoked",
            extra={
                "community_slug": slug,
                "permission": grant.permission,
                "target_user_uid": str(grant.user_uid),
                "user_uid": str(actor.uid),
            },
        )
        await self._notify(
            NotificationType.COMMUNITY_PERMISSION_REVOKED, grant.user_uid, slug, grant.permission
        )

    async def _notify(
        self,
        notification_type: NotificationType,
        user_uid: UUID,
        slug: str,
        permission: str,
    ) -> None:
        await self._notifications.notify(
            [user_uid],
            notification_type,
            {"permission": permission, "communitySlug": slug},
        )
