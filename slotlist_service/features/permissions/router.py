"""API router for community permission management.

Endpoints:
    GET    /communities/{communitySlug}/permissions                  - List grants
    POST   /communities/{communitySlug}/permissions                  - Grant a permission
    DELETE /communities/{communitySlug}/permissions/{permissionUid}  - Revoke a permission

Every endpoint requires either the founder or the leader grant of the
community named in the path.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from slotlist_service.core.acl import CommunityRole, RouteACL, community_permission
from slotlist_service.core.dependencies.auth import require_acl
from slotlist_service.core.dependencies.database import DBSessionDep
from slotlist_service.core.schemas.auth import AuthUser
from slotlist_service.core.schemas.base import DEFAULT_LIMIT, MAX_LIMIT, SuccessResponse
from slotlist_service.features.permissions.schemas import (
    PermissionCreate,
    PermissionEnvelope,
    PermissionListResponse,
    PermissionResponse,
)
from slotlist_service.features.permissions.service import CommunityPermissionService

router = APIRouter(prefix="/communities/{communitySlug}/permissions", tags=["permissions"])

COMMUNITY_ADMIN_ACL = RouteACL(
    [
        community_permission("{{communitySlug}}", CommunityRole.FOUNDER),
        community_permission("{{communitySlug}}", CommunityRole.LEADER),
    ]
)

CommunityAdmin = Annotated[AuthUser, Depends(require_acl(COMMUNITY_ADMIN_ACL))]
CommunitySlugPath = Annotated[str, Path(alias="communitySlug", min_length=1, max_length=255)]


@router.get(
    "",
    response_model=PermissionListResponse,
    summary="List community permissions",
)
async def list_permissions(
    slug: CommunitySlugPath,
    session: DBSessionDep,
    user: CommunityAdmin,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> PermissionListResponse:
    service = CommunityPermissionService(session)
    result = await service.list_permissions(slug, limit=limit, offset=offset)

    return PermissionListResponse(
        limit=limit,
        offset=offset,
        count=len(result.items),
        total=result.total,
        more_available=result.has_next,
        permissions=[PermissionResponse.model_validate(p) for p in result.items],
    )


@router.post(
    "",
    response_model=PermissionEnvelope,
    summary="Grant a community permission",
    responses={
        404: {"description": "User not found"},
        409: {"description": "Permission already exists"},
    },
)
async def create_permission(
    slug: CommunitySlugPath,
    payload: PermissionCreate,
    session: DBSessionDep,
    user: CommunityAdmin,
) -> PermissionEnvelope:
    service = CommunityPermissionService(session)
    permission = await service.grant_permission(user, slug, payload.user_uid, payload.permission)
    await session.commit()

    return PermissionEnvelope(permission=PermissionResponse.model_validate(permission))


@router.delete(
    "/{permissionUid}",
    response_model=SuccessResponse,
    summary="Revoke a community permission",
    responses={404: {"description": "Permission not found"}},
)
async def delete_permission(
    slug: CommunitySlugPath,
    permission_uid: Annotated[UUID, Path(alias="permissionUid")],
    session: DBSessionDep,
    user: CommunityAdmin,
) -> SuccessResponse:
    service = CommunityPermissionService(session)
    await service.revoke_permission(user, slug, permission_uid)
    await session.commit()
    return SuccessResponse()
