"""Tests for authentication dependencies and route permission guards."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Annotated
from uuid import uuid4

import pytest
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient

from slotlist_service.app.exception_handlers import configure_exception_handlers
from slotlist_service.core.acl import SUPERADMIN_PERMISSION, RouteACL
from slotlist_service.core.dependencies.auth import (
    AuthUserDep,
    OptionalAuthUser,
    extract_token,
    require_acl,
    require_permissions,
)
from slotlist_service.core.schemas.auth import AuthUser

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from slotlist_service.infra.auth.jwt import JWTCodec

COMMUNITY_ADMIN = require_permissions(
    "community.{{communitySlug}}.founder",
    "community.{{communitySlug}}.leader",
)
COMMUNITY_FOUNDER_AND_LEADER = require_permissions(
    "community.{{communitySlug}}.founder",
    "community.{{communitySlug}}.leader",
    strict=True,
)
UNRESTRICTED = require_acl(RouteACL())
SUPERADMIN = require_permissions(SUPERADMIN_PERMISSION)


def _user_body(user: AuthUser | None) -> dict[str, object]:
    if user is None:
        return {"user": None}
    return {"user": str(user.uid), "permissions": user.permissions}


@pytest.fixture
def guarded_app() -> FastAPI:
    app = FastAPI()
    configure_exception_handlers(app)

    @app.get("/account")
    async def account(user: AuthUserDep) -> dict[str, object]:
        return _user_body(user)

    @app.get("/optional")
    async def optional(user: OptionalAuthUser) -> dict[str, object]:
        return _user_body(user)

    @app.get("/unrestricted")
    async def unrestricted(
        user: Annotated[AuthUser | None, Depends(UNRESTRICTED)],
    ) -> dict[str, object]:
        return _user_body(user)

    @app.get("/communities/{communitySlug}/permissions")
    async def community_admin(
        request: Request,
        user: Annotated[AuthUser, Depends(COMMUNITY_ADMIN)],
    ) -> dict[str, object]:
        decision = request.state.access_decision
        return {**_user_body(user), "matched": list(decision.matched)}

    @app.get("/communities/{communitySlug}/strict")
    async def community_strict(
        user: Annotated[AuthUser, Depends(COMMUNITY_FOUNDER_AND_LEADER)],
    ) -> dict[str, object]:
        return _user_body(user)

    @app.get("/superadmin")
    async def superadmin(user: Annotated[AuthUser, Depends(SUPERADMIN)]) -> dict[str, object]:
        return _user_body(user)

    return app


@pytest.fixture
async def guarded_client(guarded_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=guarded_app), base_url="http://test") as ac:
        yield ac


class TestExtractToken:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("JWT abc.def.ghi", "abc.def.ghi"),
            ("jwt abc.def.ghi", "abc.def.ghi"),
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("  JWT   abc.def.ghi  ", "abc.def.ghi"),
            ("Basic dXNlcjpwYXNz", None),
            ("JWT", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract(self, header: str | None, expected: str | None) -> None:
        assert extract_token(header, ["jwt", "bearer"]) == expected


@pytest.mark.unit
class TestAuthentication:
    async def test_missing_header_is_401_with_challenge(self, guarded_client: AsyncClient) -> None:
        response = await guarded_client.get("/account")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "JWT"
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["type"] == "missing-authentication"

    async def test_invalid_token_is_401(self, guarded_client: AsyncClient) -> None:
        response = await guarded_client.get("/account", headers={"Authorization": "JWT not-a-token"})

        assert response.status_code == 401
        assert response.json()["type"] == "invalid-token"

    async def test_expired_token_is_401(self, guarded_client: AsyncClient, codec: JWTCodec) -> None:
        token = codec.issue(
            uuid4(),
            "Expired",
            [],
            now=datetime.now(UTC) - timedelta(days=10),
            expires_in=timedelta(minutes=5),
        )

        response = await guarded_client.get("/account", headers={"Authorization": f"JWT {token}"})

        assert response.status_code == 401

    async def test_bearer_scheme_is_accepted(
        self, guarded_client: AsyncClient, make_token: Callable[..., str]
    ) -> None:
        response = await guarded_client.get(
            "/account", headers={"Authorization": f"Bearer {make_token(['admin.announcement'])}"}
        )

        assert response.status_code == 200
        assert response.json()["permissions"] == ["admin.announcement"]

    async def test_optional_auth_tolerates_missing_and_invalid(
        self, guarded_client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        anonymous = await guarded_client.get("/optional")
        invalid = await guarded_client.get("/optional", headers={"Authorization": "JWT broken"})
        authenticated = await guarded_client.get("/optional", headers=auth_headers())

        assert anonymous.json() == {"user": None}
        assert invalid.json() == {"user": None}
        assert authenticated.json()["user"] is not None


@pytest.mark.unit
class TestRouteGuards:
    async def test_empty_declaration_allows_anonymous(self, guarded_client: AsyncClient) -> None:
        response = await guarded_client.get("/unrestricted")

        assert response.status_code == 200
        assert response.json() == {"user": None}

    async def test_empty_declaration_still_identifies_caller(
        self, guarded_client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        response = await guarded_client.get("/unrestricted", headers=auth_headers([]))

        assert response.status_code == 200
        assert response.json()["user"] is not None

    async def test_unauthenticated_is_401_before_permission_check(
        self, guarded_client: AsyncClient
    ) -> None:
        response = await guarded_client.get("/communities/sel/permissions")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "JWT"

    async def test_founder_passes_any_of(
        self, guarded_client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        response = await guarded_client.get(
            "/communities/sel/permissions", headers=auth_headers(["community.sel.founder"])
        )

        assert response.status_code == 200
        assert response.json()["matched"] == ["community.sel.founder"]

    async def test_grant_for_other_community_is_403(
        self,
        guarded_client: AsyncClient,
        auth_headers: Callable[..., dict[str, str]],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.INFO, logger="slotlist_service.core.dependencies.auth")

        response = await guarded_client.get(
            "/communities/sel/permissions", headers=auth_headers(["community.other.founder"])
        )

        assert response.status_code == 403
        body = response.json()
        assert body["type"] == "insufficient-permissions"
        assert body["detail"] == "Forbidden"
        assert "User tried to access restricted route without proper permission" in caplog.text

    async def test_strict_requires_every_pattern(
        self, guarded_client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        founder_only = await guarded_client.get(
            "/communities/sel/strict", headers=auth_headers(["community.sel.founder"])
        )
        both = await guarded_client.get(
            "/communities/sel/strict",
            headers=auth_headers(["community.sel.founder", "community.sel.leader"]),
        )

        assert founder_only.status_code == 403
        assert both.status_code == 200

    @pytest.mark.parametrize("grant", ["*", "admin.superadmin"])
    async def test_bypass_grants_pass_every_guard(
        self,
        grant: str,
        guarded_client: AsyncClient,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        headers = auth_headers([grant])

        for path in ("/communities/sel/permissions", "/communities/sel/strict", "/superadmin"):
            response = await guarded_client.get(path, headers=headers)
            assert response.status_code == 200, path

    async def test_superadmin_route_rejects_regular_users(
        self, guarded_client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        response = await guarded_client.get("/superadmin", headers=auth_headers(["admin.announcement"]))

        assert response.status_code == 403

    def test_guard_exposes_declaration(self) -> None:
        assert COMMUNITY_ADMIN.acl == RouteACL(  # type: ignore[attr-defined]
            ["community.{{communitySlug}}.founder", "community.{{communitySlug}}.leader"]
        )
