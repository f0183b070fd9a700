"""API router for mission slot templates.

Endpoints:
    GET    /missionSlotTemplates                    - List visible templates (optional auth)
    POST   /missionSlotTemplates                    - Create a template
    GET    /missionSlotTemplates/{slotTemplateUid}  - Template details (optional auth)
    PATCH  /missionSlotTemplates/{slotTemplateUid}  - Update an own template
    DELETE /missionSlotTemplates/{slotTemplateUid}  - Delete an own template
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from slotlist_service.core.dependencies.auth import AuthUserDep, OptionalAuthUser
from slotlist_service.core.dependencies.database import DBSessionDep
from slotlist_service.core.schemas.base import DEFAULT_LIMIT, MAX_LIMIT, SuccessResponse
from slotlist_service.features.slot_templates.schemas import (
    SlotTemplateCreate,
    SlotTemplateDetailsResponse,
    SlotTemplateEnvelope,
    SlotTemplateListResponse,
    SlotTemplateResponse,
    SlotTemplateUpdate,
)
from slotlist_service.features.slot_templates.service import SlotTemplateService

router = APIRouter(prefix="/missionSlotTemplates", tags=["mission slot templates"])

SlotTemplateUidPath = Annotated[UUID, Path(alias="slotTemplateUid", description="UID of the slot template")]
NOT_FOUND = {404: {"description": "Mission slot template not found"}}


def _envelope(template: object) -> SlotTemplateEnvelope:
    return SlotTemplateEnvelope(slot_template=SlotTemplateDetailsResponse.model_validate(template))


@router.get(
    "",
    response_model=SlotTemplateListResponse,
    summary="List mission slot templates",
    description="Sorted by title. Anonymous callers only see public templates; "
    "holders of `admin.mission` see all of them.",
)
async def list_slot_templates(
    session: DBSessionDep,
    user: OptionalAuthUser,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> SlotTemplateListResponse:
    result = await SlotTemplateService(session).list_templates(user, limit=limit, offset=offset)

    return SlotTemplateListResponse(
        limit=limit,
        offset=offset,
        count=len(result.items),
        total=result.total,
        more_available=result.has_next,
        slot_templates=[SlotTemplateResponse.model_validate(t) for t in result.items],
    )


@router.post("", response_model=SlotTemplateEnvelope, summary="Create a mission slot template")
async def create_slot_template(
    payload: SlotTemplateCreate,
    session: DBSessionDep,
    user: AuthUserDep,
) -> SlotTemplateEnvelope:
    template = await SlotTemplateService(session).create_template(user, payload)
    await session.commit()
    return _envelope(template)


@router.get(
    "/{slotTemplateUid}",
    response_model=SlotTemplateEnvelope,
    summary="Get mission slot template details",
    responses=NOT_FOUND,
)
async def get_slot_template(
    slot_template_uid: SlotTemplateUidPath,
    session: DBSessionDep,
    user: OptionalAuthUser,
) -> SlotTemplateEnvelope:
    template = await SlotTemplateService(session).get_template(user, slot_template_uid)
    return _envelope(template)


@router.patch(
    "/{slotTemplateUid}",
    response_model=SlotTemplateEnvelope,
    summary="Update a mission slot template",
    description="Only the creator can update a template. `slotGroups` replaces the full list.",
    responses=NOT_FOUND,
)
async def update_slot_template(
    slot_template_uid: SlotTemplateUidPath,
    payload: SlotTemplateUpdate,
    session: DBSessionDep,
    user: AuthUserDep,
) -> SlotTemplateEnvelope:
    template = await SlotTemplateService(session).update_template(user, slot_template_uid, payload)
    await session.commit()
    return _envelope(template)


@router.delete(
    "/{slotTemplateUid}",
    response_model=SuccessResponse,
    summary="Delete a mission slot template",
    responses=NOT_FOUND,
)
async def delete_slot_template(
    slot_template_uid: SlotTemplateUidPath,
    session: DBSessionDep,
    user: AuthUserDep,
) -> SuccessResponse:
    await SlotTemplateService(session).delete_template(user, slot_template_uid)
    await session.commit()
    return SuccessResponse()
