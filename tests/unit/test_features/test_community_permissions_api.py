"""Tests for community permission management."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient

    from slotlist_service.core.models import User

BASE = "/v1/communities/sel/permissions"
FOUNDER = "community.sel.founder"
LEADER = "community.sel.leader"
RECRUITMENT = "community.sel.recruitment"


def _grant_uid(user: User, permission: str) -> str:
    return next(str(p.uid) for p in user.permissions if p.permission == permission)


@pytest.fixture
async def community(create_user: Callable[..., Awaitable[User]]) -> dict[str, User]:
    """Founder, leader and recruiter of ``sel`` plus a member of another community."""
    return {
        "founder": await create_user("Founder", [FOUNDER]),
        "leader": await create_user("Leader", [LEADER]),
        "recruiter": await create_user("Recruiter", [RECRUITMENT]),
        "outsider": await create_user("Outsider", ["community.other.founder", "admin.announcement"]),
    }


@pytest.fixture
def as_user(auth_headers: Callable[..., dict[str, str]]) -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        return auth_headers(user.permission_strings, uid=user.uid, nickname=user.nickname)

    return _headers


@pytest.mark.unit
class TestCommunityPermissionAccess:
    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get(BASE)

        assert response.status_code == 401

    @pytest.mark.parametrize("member", ["recruiter", "outsider"])
    async def test_non_admins_are_forbidden(
        self,
        member: str,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.get(BASE, headers=as_user(community[member]))

        assert response.status_code == 403
        assert response.json()["type"] == "insufficient-permissions"

    @pytest.mark.parametrize("member", ["founder", "leader"])
    async def test_founder_or_leader_may_list(
        self,
        member: str,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.get(BASE, headers=as_user(community[member]))

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert [p["permission"] for p in body["permissions"]] == [FOUNDER, LEADER, RECRUITMENT]
        assert body["permissions"][0]["user"]["nickname"] == "Founder"

    async def test_grant_for_path_community_only(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.get(
            "/v1/communities/other/permissions", headers=as_user(community["leader"])
        )

        assert response.status_code == 403

    async def test_superadmin_without_community_grants(
        self,
        client: AsyncClient,
        community: dict[str, User],
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = await client.get(BASE, headers=auth_headers(["admin.superadmin"]))

        assert response.status_code == 200


@pytest.mark.unit
class TestGrantPermission:
    async def test_leader_grants_recruitment(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        target = community["outsider"]

        response = await client.post(
            BASE,
            json={"userUid": str(target.uid), "permission": RECRUITMENT},
            headers=as_user(community["leader"]),
        )

        assert response.status_code == 200
        permission = response.json()["permission"]
        assert permission["permission"] == RECRUITMENT
        assert permission["user"] == {"uid": str(target.uid), "nickname": "Outsider"}

    async def test_leader_cannot_grant_leader(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.post(
            BASE,
            json={"userUid": str(community["recruiter"].uid), "permission": LEADER},
            headers=as_user(community["leader"]),
        )

        assert response.status_code == 403
        assert response.json()["type"] == "founder-required"

    async def test_founder_grants_leader(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.post(
            BASE,
            json={"userUid": str(community["recruiter"].uid), "permission": LEADER},
            headers=as_user(community["founder"]),
        )

        assert response.status_code == 200

    @pytest.mark.parametrize(
        "permission",
        [FOUNDER, "community.other.recruitment", "community.sel.editor", "admin.superadmin", "*"],
    )
    async def test_ungrantable_permissions(
        self,
        permission: str,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.post(
            BASE,
            json={"userUid": str(community["outsider"].uid), "permission": permission},
            headers=as_user(community["founder"]),
        )

        assert response.status_code == 422
        assert response.json()["type"] == "invalid-permission"

    async def test_malformed_permission(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.post(
            BASE,
            json={"userUid": str(community["outsider"].uid), "permission": "community..leader"},
            headers=as_user(community["founder"]),
        )

        assert response.status_code == 422
        assert response.json()["type"] == "validation-error"

    async def test_duplicate_grant(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.post(
            BASE,
            json={"userUid": str(community["recruiter"].uid), "permission": RECRUITMENT},
            headers=as_user(community["leader"]),
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Permission already exists"

    async def test_concurrent_duplicate_grant_is_a_conflict(
        self,
        monkeypatch: pytest.MonkeyPatch,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        """The row already exists but the lookup misses it, as with two racing requests."""
        from slotlist_service.features.accounts.repository import PermissionRepository

        monkeypatch.setattr(PermissionRepository, "get_grant", AsyncMock(return_value=None))

        response = await client.post(
            BASE,
            json={"userUid": str(community["recruiter"].uid), "permission": RECRUITMENT},
            headers=as_user(community["leader"]),
        )

        assert response.status_code == 409
        assert response.json()["type"] == "permission-exists"
        assert response.json()["detail"] == "Permission already exists"

    async def test_unknown_user(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.post(
            BASE,
            json={"userUid": str(uuid4()), "permission": RECRUITMENT},
            headers=as_user(community["leader"]),
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"


@pytest.mark.unit
class TestRevokePermission:
    async def test_leader_revokes_recruitment(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        uid = _grant_uid(community["recruiter"], RECRUITMENT)

        response = await client.delete(f"{BASE}/{uid}", headers=as_user(community["leader"]))
        listed = await client.get(BASE, headers=as_user(community["leader"]))

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert RECRUITMENT not in [p["permission"] for p in listed.json()["permissions"]]

    async def test_founder_is_never_revocable(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        uid = _grant_uid(community["founder"], FOUNDER)

        response = await client.delete(f"{BASE}/{uid}", headers=as_user(community["founder"]))

        assert response.status_code == 403
        assert response.json()["type"] == "founder-permission-immutable"

    async def test_leader_revocation_requires_founder(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        uid = _grant_uid(community["leader"], LEADER)

        by_leader = await client.delete(f"{BASE}/{uid}", headers=as_user(community["leader"]))
        by_founder = await client.delete(f"{BASE}/{uid}", headers=as_user(community["founder"]))

        assert by_leader.status_code == 403
        assert by_founder.status_code == 200

    async def test_permission_of_other_community_is_not_found(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        uid = _grant_uid(community["outsider"], "community.other.founder")

        response = await client.delete(f"{BASE}/{uid}", headers=as_user(community["founder"]))

        assert response.status_code == 404
        assert response.json()["detail"] == "Permission not found"

    async def test_unknown_permission(
        self,
        client: AsyncClient,
        community: dict[str, User],
        as_user: Callable[[User], dict[str, str]],
    ) -> None:
        response = await client.delete(f"{BASE}/{uuid4()}", headers=as_user(community["founder"]))

        assert response.status_code == 404
