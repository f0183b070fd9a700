"""Tests for the account and token refresh endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from slotlist_service.core.models import Permission
from slotlist_service.infra.database import get_async_session

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from httpx import AsyncClient

    from slotlist_service.core.models import User
    from slotlist_service.infra.auth.jwt import JWTCodec


@pytest.mark.unit
class TestAccountAPI:
    async def test_account_lists_stored_permissions(
        self,
        client: AsyncClient,
        create_user: Callable[..., Awaitable[User]],
        auth_headers: Callable[..., dict[str, str]],
        test_user_uid: UUID,
    ) -> None:
        await create_user("MorpheusXAUT", ["community.sel.leader", "admin.announcement"], uid=test_user_uid)

        response = await client.get("/v1/auth/account", headers=auth_headers([]))

        assert response.status_code == 200
        assert response.json() == {
            "user": {
                "uid": str(test_user_uid),
                "nickname": "MorpheusXAUT",
                "active": True,
                "permissions": ["admin.announcement", "community.sel.leader"],
            }
        }

    async def test_unknown_token_user(
        self, client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        response = await client.get("/v1/auth/account", headers=auth_headers([]))

        assert response.status_code == 401
        assert response.json()["detail"] == "Token user not found"

    async def test_inactive_user(
        self,
        client: AsyncClient,
        create_user: Callable[..., Awaitable[User]],
        auth_headers: Callable[..., dict[str, str]],
        test_user_uid: UUID,
    ) -> None:
        await create_user("Gone", [], uid=test_user_uid, active=False)

        response = await client.get("/v1/auth/account", headers=auth_headers([]))

        assert response.status_code == 401


@pytest.mark.unit
class TestAccountUpdateAPI:
    async def test_nickname_change_is_stored(
        self,
        client: AsyncClient,
        create_user: Callable[..., Awaitable[User]],
        auth_headers: Callable[..., dict[str, str]],
        test_user_uid: UUID,
    ) -> None:
        await create_user("Old Name", ["community.sel.member"], uid=test_user_uid)

        response = await client.patch(
            "/v1/auth/account", json={"nickname": "New Name"}, headers=auth_headers([])
        )
        account = await client.get("/v1/auth/account", headers=auth_headers([]))

        assert response.status_code == 200
        assert response.json()["user"]["nickname"] == "New Name"
        assert response.json()["user"]["permissions"] == ["community.sel.member"]
        assert account.json()["user"]["nickname"] == "New Name"

    async def test_empty_nickname_is_rejected(
        self,
        client: AsyncClient,
        create_user: Callable[..., Awaitable[User]],
        auth_headers: Callable[..., dict[str, str]],
        test_user_uid: UUID,
    ) -> None:
        await create_user("Old Name", [], uid=test_user_uid)

        response = await client.patch("/v1/auth/account", json={"nickname": ""}, headers=auth_headers([]))

        assert response.status_code == 422

    async def test_unknown_token_user(
        self, client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        response = await client.patch(
            "/v1/auth/account", json={"nickname": "Ghost"}, headers=auth_headers([])
        )

        assert response.status_code == 401


@pytest.mark.unit
class TestRefreshAPI:
    async def test_refresh_picks_up_new_grants(
        self,
        client: AsyncClient,
        create_user: Callable[..., Awaitable[User]],
        auth_headers: Callable[..., dict[str, str]],
        codec: JWTCodec,
        test_user_uid: UUID,
    ) -> None:
        await create_user("MorpheusXAUT", ["community.sel.recruitment"], uid=test_user_uid)
        async with get_async_session() as session:
            session.add(Permission(user_uid=test_user_uid, permission="community.sel.leader"))
            await session.commit()

        response = await client.post(
            "/v1/auth/refresh", headers=auth_headers(["community.sel.recruitment"])
        )

        assert response.status_code == 200
        payload = codec.decode(response.json()["token"])
        assert payload.user.uid == test_user_uid
        assert payload.permissions == ["community.sel.leader", "community.sel.recruitment"]

    async def test_refresh_requires_token(self, client: AsyncClient) -> None:
        response = await client.post("/v1/auth/refresh")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "JWT"
