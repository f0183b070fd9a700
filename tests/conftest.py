"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings for an isolated, in-memory test run
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: engine, tables and sessions on in-memory SQLite
    - Authentication Fixtures: token factory and stored users
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

    from slotlist_service.core.models import User
    from slotlist_service.infra.auth.jwt import JWTCodec

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests-only-0123456789")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_CREATE_TABLES", "true")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

TEST_USER_UID = UUID("5b8ed1f2-7d0b-4c0e-9b43-3c6a1f0b2a11")


@pytest.fixture(autouse=True)
def _reset_settings_caches() -> Iterator[None]:
    """Reload settings from the environment for every test."""
    from slotlist_service.core.settings import clear_all_caches

    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app() -> FastAPI:
    """Fresh application instance; lifespan is not run by ASGITransport."""
    from slotlist_service.app.main import create_app

    return create_app()


@pytest.fixture
async def client(app: FastAPI, db_engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTPX client bound to the app, with database tables in place.

    Example:
        async def test_status(client):
            response = await client.get("/v1/status")
            assert response.status_code == 200
    """
    _ = db_engine
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Process engine on in-memory SQLite with all tables created.

    Routes and fixtures share this engine, so rows committed here are
    visible to requests made through ``client``.
    """
    import slotlist_service.core.models  # noqa: F401
    from slotlist_service.core.database import Base
    from slotlist_service.infra.database import close_database, get_engine

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await close_database()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session on the shared engine, rolled back after the test."""
    from slotlist_service.infra.database import get_session_factory

    _ = db_engine
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ============================================================================
# Authentication Fixtures
# ============================================================================


@pytest.fixture
def test_user_uid() -> UUID:
    """UID embedded in tokens from ``make_token`` by default."""
    return TEST_USER_UID


@pytest.fixture
def codec() -> JWTCodec:
    from slotlist_service.infra.auth.jwt import get_jwt_codec

    return get_jwt_codec()


@pytest.fixture
def make_token(codec: JWTCodec) -> Callable[..., str]:
    """Factory issuing signed tokens.

    Example:
        token = make_token(["admin.announcement"])
        headers = {"Authorization": f"JWT {token}"}
    """

    def _make(
        permissions: list[str] | None = None,
        *,
        uid: UUID = TEST_USER_UID,
        nickname: str = "MorpheusXAUT",
    ) -> str:
        return codec.issue(uid, nickname, permissions or [])

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> Callable[..., dict[str, str]]:
    """Factory building ``Authorization: JWT <token>`` headers."""

    def _headers(permissions: list[str] | None = None, **kwargs: object) -> dict[str, str]:
        return {"Authorization": f"JWT {make_token(permissions, **kwargs)}"}

    return _headers


@pytest.fixture
def create_user(db_engine: AsyncEngine) -> Callable[..., Awaitable[User]]:
    """Factory persisting a user with stored grants in its own committed session."""
    from slotlist_service.core.models import Permission, User
    from slotlist_service.infra.database import get_async_session

    _ = db_engine

    async def _create(
        nickname: str = "MorpheusXAUT",
        permissions: list[str] | None = None,
        *,
        uid: UUID | None = None,
        active: bool = True,
    ) -> User:
        async with get_async_session() as session:
            user = User(uid=uid or uuid4(), nickname=nickname, active=active)
            user.permissions = [Permission(permission=p) for p in permissions or []]
            session.add(user)
            await session.commit()
            return user

    return _create
