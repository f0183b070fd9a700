"""API router for the authenticated user's account."""

from __future__ import annotations

from fastapi import APIRouter

from slotlist_service.core.dependencies.auth import AuthUserDep, JWTCodecDep
from slotlist_service.core.dependencies.database import DBSessionDep
from slotlist_service.core.models import User
from slotlist_service.core.schemas.auth import TokenResponse
from slotlist_service.features.accounts.schemas import (
    AccountEnvelope,
    AccountResponse,
    AccountUpdate,
)
from slotlist_service.features.accounts.service import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])


def _envelope(account: User, grants: list[str]) -> AccountEnvelope:
    return AccountEnvelope(
        user=AccountResponse(
            uid=account.uid,
            nickname=account.nickname,
            active=account.active,
            permissions=grants,
        )
    )


@router.get(
    "/account",
    response_model=AccountEnvelope,
    summary="Get the authenticated account",
    responses={401: {"description": "Token user not found"}},
)
async def get_account(user: AuthUserDep, session: DBSessionDep) -> AccountEnvelope:
    account, grants = await AccountService(session).get_account(user.uid)
    return _envelope(account, grants)


@router.patch(
    "/account",
    response_model=AccountEnvelope,
    summary="Update the authenticated account",
    description="Change the caller's nickname. Refresh the token afterwards to carry the new nickname.",
    responses={401: {"description": "Token user not found"}},
)
async def update_account(
    payload: AccountUpdate,
    user: AuthUserDep,
    session: DBSessionDep,
) -> AccountEnvelope:
    account, grants = await AccountService(session).update_account(user.uid, nickname=payload.nickname)
    await session.commit()
    return _envelope(account, grants)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh the token",
    description="Issue a new token with the permissions currently stored for the user.",
    responses={401: {"description": "Token user not found"}},
)
async def refresh_token(
    user: AuthUserDep,
    session: DBSessionDep,
    codec: JWTCodecDep,
) -> TokenResponse:
    token = await AccountService(session).refresh_token(user.uid, codec)
    return TokenResponse(token=token)
