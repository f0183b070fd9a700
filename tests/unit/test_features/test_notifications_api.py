"""Tests for notifications and the features that create them."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from slotlist_service.features.notifications import Notification, NotificationService, NotificationType
from slotlist_service.features.notifications.repository import NotificationRepository
from slotlist_service.infra.database import get_async_session

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from slotlist_service.core.models import User

CREATED = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


async def _seed_notifications(user: User, count: int) -> list[Notification]:
    """Store ``count`` generic notifications, the last one being the newest."""
    rows = [
        Notification(
            user_uid=user.uid,
            notification_type=NotificationType.GENERIC,
            data={"message": f"Message {i}"},
            created_at=CREATED + timedelta(minutes=i),
        )
        for i in range(count)
    ]
    async with get_async_session() as session:
        session.add_all(rows)
        await session.commit()
    return rows


async def _stored_for(user_uid: UUID) -> list[Notification]:
    async with get_async_session() as session:
        result = await session.execute(
            select(Notification).where(Notification.user_uid == user_uid).order_by(Notification.created_at)
        )
        return list(result.scalars().all())


@pytest.fixture
async def member(create_user: Callable[..., Awaitable[User]], test_user_uid: UUID) -> User:
    return await create_user("Member", [], uid=test_user_uid)


@pytest.fixture
def member_headers(member: User, auth_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    return auth_headers([], uid=member.uid, nickname=member.nickname)


@pytest.mark.unit
class TestNotificationListAPI:
    @pytest.mark.parametrize("path", ["/v1/notifications", "/v1/notifications/unseen"])
    async def test_requires_authentication(self, client: AsyncClient, path: str) -> None:
        response = await client.get(path)

        assert response.status_code == 401

    async def test_newest_first_and_marked_seen(
        self, client: AsyncClient, member: User, member_headers: dict[str, str]
    ) -> None:
        await _seed_notifications(member, 3)

        first = await client.get("/v1/notifications", headers=member_headers)
        second = await client.get("/v1/notifications", headers=member_headers)

        body = first.json()
        assert first.status_code == 200
        assert body["total"] == 3
        assert body["moreAvailable"] is False
        assert [n["data"]["message"] for n in body["notifications"]] == ["Message 2", "Message 1", "Message 0"]
        assert body["notifications"][0]["notificationType"] == "generic"
        assert body["notifications"][0]["seenAt"] is None
        assert second.json()["total"] == 0
        assert all(n.seen_at is not None for n in await _stored_for(member.uid))

    async def test_include_seen(self, client: AsyncClient, member: User, member_headers: dict[str, str]) -> None:
        await _seed_notifications(member, 2)
        await client.get("/v1/notifications", headers=member_headers)

        response = await client.get("/v1/notifications", params={"includeSeen": "true"}, headers=member_headers)

        body = response.json()
        assert body["total"] == 2
        assert all(n["seenAt"] is not None for n in body["notifications"])

    async def test_only_returned_page_is_marked_seen(
        self, client: AsyncClient, member: User, member_headers: dict[str, str]
    ) -> None:
        await _seed_notifications(member, 3)

        page = await client.get("/v1/notifications", params={"limit": 2}, headers=member_headers)
        unseen = await client.get("/v1/notifications/unseen", headers=member_headers)

        assert page.json()["count"] == 2
        assert page.json()["moreAvailable"] is True
        assert unseen.json() == {"unseen": 1}

    async def test_other_users_notifications_are_not_listed(
        self,
        client: AsyncClient,
        member: User,
        member_headers: dict[str, str],
        create_user: Callable[..., Awaitable[User]],
    ) -> None:
        other = await create_user("Other")
        await _seed_notifications(other, 2)

        listed = await client.get("/v1/notifications", headers=member_headers)
        unseen = await client.get("/v1/notifications/unseen", headers=member_headers)

        assert listed.json()["total"] == 0
        assert unseen.json() == {"unseen": 0}


@pytest.mark.unit
class TestNotificationService:
    async def test_notify_without_recipients(self, db_session: AsyncSession) -> None:
        created = await NotificationService(db_session).notify([], NotificationType.GENERIC, {"message": "x"})

        assert created == 0

    async def test_failed_insert_is_logged_and_ignored(
        self,
        db_session: AsyncSession,
        member: User,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        repo = NotificationRepository()

        async def _fail(session: AsyncSession, notifications: list[Notification]) -> None:
            raise OperationalError("INSERT INTO notifications", {}, Exception("database is locked"))

        monkeypatch.setattr(repo, "add_many", _fail)

        with caplog.at_level(logging.WARNING):
            created = await NotificationService(db_session, repo=repo).notify(
                [member.uid], NotificationType.GENERIC, {"message": "x"}
            )
        kept = await NotificationService(db_session).notify(
            [member.uid], NotificationType.GENERIC, {"message": "y"}
        )

        assert created == 0
        assert kept == 1
        assert "Failed to create notifications, ignoring" in caplog.messages


@pytest.mark.unit
class TestAnnouncementNotifications:
    ADMIN = ["admin.announcement"]

    @pytest.fixture
    async def users(self, create_user: Callable[..., Awaitable[User]], test_user_uid: UUID) -> dict[str, User]:
        return {
            "author": await create_user("Author", self.ADMIN, uid=test_user_uid),
            "reader": await create_user("Reader"),
            "inactive": await create_user("Gone", active=False),
        }

    async def test_create_notifies_other_active_users(
        self, client: AsyncClient, users: dict[str, User], auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        response = await client.post(
            "/v1/announcements",
            json={
                "title": "Server update",
                "content": "New modset",
                "announcementType": "update",
                "sendNotifications": True,
            },
            headers=auth_headers(self.ADMIN),
        )

        announcement_uid = response.json()["announcement"]["uid"]
        [notification] = await _stored_for(users["reader"].uid)
        assert notification.notification_type is NotificationType.ANNOUNCEMENT_UPDATE
        assert notification.data == {"announcementUid": announcement_uid, "title": "Server update"}
        assert await _stored_for(users["author"].uid) == []
        assert await _stored_for(users["inactive"].uid) == []

    async def test_create_without_flag_sends_nothing(
        self, client: AsyncClient, users: dict[str, User], auth_headers: Callable[..., dict[str, str]]
    ) -> None:
        await client.post(
            "/v1/announcements",
            json={"title": "Quiet", "content": "Shh", "announcementType": "generic"},
            headers=auth_headers(self.ADMIN),
        )

        assert await _stored_for(users["reader"].uid) == []

    async def test_delete_removes_its_notifications(
        self,
        client: AsyncClient,
        users: dict[str, User],
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        headers = auth_headers(self.ADMIN)
        await _seed_notifications(users["reader"], 1)
        created = await client.post(
            "/v1/announcements",
            json={"title": "Event", "content": "Sunday", "announcementType": "generic", "sendNotifications": True},
            headers=headers,
        )
        uid = created.json()["announcement"]["uid"]
        assert len(await _stored_for(users["reader"].uid)) == 2

        response = await client.delete(f"/v1/announcements/{uid}", headers=headers)

        assert response.status_code == 200
        [remaining] = await _stored_for(users["reader"].uid)
        assert remaining.notification_type is NotificationType.GENERIC


@pytest.mark.unit
class TestPermissionNotifications:
    async def test_grant_and_revoke_notify_the_target(
        self,
        client: AsyncClient,
        create_user: Callable[..., Awaitable[User]],
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        leader = await create_user("Leader", ["community.sel.leader"])
        target = await create_user("Recruit")
        headers = auth_headers(leader.permission_strings, uid=leader.uid, nickname=leader.nickname)

        granted = await client.post(
            "/v1/communities/sel/permissions",
            json={"userUid": str(target.uid), "permission": "community.sel.recruitment"},
            headers=headers,
        )
        permission_uid = granted.json()["permission"]["uid"]
        await client.delete(f"/v1/communities/sel/permissions/{permission_uid}", headers=headers)

        stored = await _stored_for(target.uid)
        assert [n.notification_type for n in stored] == [
            NotificationType.COMMUNITY_PERMISSION_GRANTED,
            NotificationType.COMMUNITY_PERMISSION_REVOKED,
        ]
        assert all(
            n.data == {"permission": "community.sel.recruitment", "communitySlug": "sel"} for n in stored
        )
        async with get_async_session() as session:
            leader_count = await session.scalar(
                select(func.count()).select_from(Notification).where(Notification.user_uid == leader.uid)
            )
        assert leader_count == 0
