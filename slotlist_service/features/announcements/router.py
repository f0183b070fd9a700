"""API router for the announcements feature.

Endpoints:
    GET    /announcements                    - List announcements (optional auth)
    POST   /announcements                    - Create an announcement (admin.announcement)
    PATCH  /announcements/{announcementUid}  - Update an announcement (admin.announcement)
    DELETE /announcements/{announcementUid}  - Delete an announcement (admin.announcement)
"""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from slotlist_service.core.acl import ADMIN_ANNOUNCEMENT
from slotlist_service.core.dependencies.auth import OptionalAuthUser, require_permissions
from slotlist_service.core.dependencies.database import DBSessionDep
from slotlist_service.core.schemas.auth import AuthUser
from slotlist_service.core.schemas.base import DEFAULT_LIMIT, MAX_LIMIT, SuccessResponse
from slotlist_service.features.announcements.schemas import (
    AnnouncementCreate,
    AnnouncementEnvelope,
    AnnouncementListResponse,
    AnnouncementResponse,
    AnnouncementUpdate,
)
from slotlist_service.features.announcements.service import AnnouncementService

router = APIRouter(prefix="/announcements", tags=["announcements"])
logger = logging.getLogger(__name__)

AnnouncementAdmin = Annotated[AuthUser, Depends(require_permissions(ADMIN_ANNOUNCEMENT))]
AnnouncementUidPath = Annotated[UUID, Path(alias="announcementUid", description="UID of the announcement")]


@router.get(
    "",
    response_model=AnnouncementListResponse,
    summary="List announcements",
    description="Paginated announcements, newest first. Scheduled announcements are only "
    "returned to holders of `admin.announcement`.",
)
async def list_announcements(
    session: DBSessionDep,
    user: OptionalAuthUser,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> AnnouncementListResponse:
    service = AnnouncementService(session)
    result = await service.list_announcements(user, limit=limit, offset=offset)

    return AnnouncementListResponse(
        limit=limit,
        offset=offset,
        count=len(result.items),
        total=result.total,
        more_available=result.has_next,
        announcements=[AnnouncementResponse.model_validate(a) for a in result.items],
    )


@router.post(
    "",
    response_model=AnnouncementEnvelope,
    summary="Create an announcement",
    responses={401: {"description": "Token user not found"}, 403: {"description": "Forbidden"}},
)
async def create_announcement(
    payload: AnnouncementCreate,
    session: DBSessionDep,
    user: AnnouncementAdmin,
) -> AnnouncementEnvelope:
    service = AnnouncementService(session)
    announcement = await service.create_announcement(user, payload)
    await session.commit()

    return AnnouncementEnvelope(announcement=AnnouncementResponse.model_validate(announcement))


@router.patch(
    "/{announcementUid}",
    response_model=AnnouncementEnvelope,
    summary="Update an announcement",
    responses={404: {"description": "Announcement not found"}},
)
async def update_announcement(
    announcement_uid: AnnouncementUidPath,
    payload: AnnouncementUpdate,
    session: DBSessionDep,
    user: AnnouncementAdmin,
) -> AnnouncementEnvelope:
    service = AnnouncementService(session)
    announcement = await service.update_announcement(announcement_uid, payload)
    await session.commit()

    return AnnouncementEnvelope(announcement=AnnouncementResponse.model_validate(announcement))


@router.delete(
    "/{announcementUid}",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an announcement",
    responses={404: {"description": "Announcement not found"}},
)
async def delete_announcement(
    announcement_uid: AnnouncementUidPath,
    session: DBSessionDep,
    user: AnnouncementAdmin,
) -> SuccessResponse:
    service = AnnouncementService(session)
    await service.delete_announcement(announcement_uid)
    await session.commit()

    logger.info(
        "Announcement removed via API",
        extra={"announcement_uid": str(announcement_uid), "user_uid": str(user.uid)},
    )
    return SuccessResponse()
