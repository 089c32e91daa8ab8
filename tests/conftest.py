# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (stores and services on in-memory SQLite)
- Integration tests (the FastAPI app through httpx's ASGI transport)
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi import FastAPI
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from kidspark.api.app import create_app
from kidspark.api.dependencies import get_db
from kidspark.core.config import (
    AdminSettings,
    CredentialSettings,
    DatabaseSettings,
    SessionSettings,
    Settings,
)
from kidspark.domains.auth import CredentialHasher, CredentialStore
from kidspark.infrastructure.database.connection import (
    build_engine,
    build_sessionmaker,
    create_schema,
)
from kidspark.infrastructure.database.models import Credential, Kid

ADMIN_PASSWORD = "cms-secret"
FAMILY_PASSWORD = "sunflower"
TEST_ITERATIONS = 1_000


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Controllable replacement for utc_now."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock frozen at a fixed UTC instant."""
    return FakeClock(datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with the full schema."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Provide the session factory bound to the test engine."""
    return build_sessionmaker(engine)


@pytest.fixture
async def db(sessionmaker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for direct store tests."""
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def hasher() -> CredentialHasher:
    """Provide a fast credential hasher."""
    return CredentialHasher(iterations=TEST_ITERATIONS)


@pytest.fixture
async def kid(sessionmaker: async_sessionmaker[AsyncSession]) -> Kid:
    """Create kid 5."""
    async with sessionmaker() as session:
        kid = Kid(id=5, name="Mia", avatar="fox", age=6)
        session.add(kid)
        await session.commit()
        return kid


@pytest.fixture
async def credential(
    sessionmaker: async_sessionmaker[AsyncSession],
    hasher: CredentialHasher,
) -> Credential:
    """Store the family password."""
    async with sessionmaker() as session:
        return await CredentialStore(session, hasher).create("Family", FAMILY_PASSWORD)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Provide settings for the test application."""
    return Settings(
        environment="test",
        debug=False,
        log_level="INFO",
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        credential=CredentialSettings(iterations=TEST_ITERATIONS),
        admin=AdminSettings(password=SecretStr(ADMIN_PASSWORD), bcrypt_rounds=4),
        session=SessionSettings(),
    )


@pytest.fixture
def app(settings: Settings, sessionmaker: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Create the application with its database dependency on the test engine."""
    app = create_app(settings)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with sessionmaker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def transport_factory(app: FastAPI) -> Callable[..., httpx.ASGITransport]:
    """Build ASGI transports for the test application."""

    def factory(**kwargs: object) -> httpx.ASGITransport:
        return httpx.ASGITransport(app=app, **kwargs)

    return factory


@pytest.fixture
async def client(
    transport_factory: Callable[..., httpx.ASGITransport],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Provide an HTTP client talking to the test application."""
    async with httpx.AsyncClient(transport=transport_factory(), base_url="http://test") as client:
        yield client


@pytest.fixture
async def kid_client(
    client: httpx.AsyncClient,
    kid: Kid,
    credential: Credential,
) -> httpx.AsyncClient:
    """Provide a client holding a kid session for kid 5."""
    response = await client.post(
        "/api/auth/verify",
        json={"password": FAMILY_PASSWORD, "kid_id": kid.id},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
async def admin_client(client: httpx.AsyncClient) -> httpx.AsyncClient:
    """Provide a client holding an administrator session."""
    response = await client.post("/api/auth/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
