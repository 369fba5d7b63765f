"""pytest configuration and fixtures.

This module provides async database fixtures backed by in-memory SQLite,
service and principal fixtures, and HTTP clients wired to the test session
through dependency overrides.
"""

from collections.abc import AsyncGenerator
from typing import cast

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.types import ASGIApp

from workout_tracker.core.config import Settings
from workout_tracker.core.jwt import create_access_token
from workout_tracker.core.principal import Principal
from workout_tracker.db.session import create_engine, create_session_factory, get_db
from workout_tracker.main import create_app
from workout_tracker.models import Base
from workout_tracker.models.enums import AuthMethod
from workout_tracker.models.user import User
from workout_tracker.services.user_service import UserService
from workout_tracker.services.workout_service import WorkoutService

TEST_PASSWORD = "test_password"


# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: in-memory SQLite and the cheapest bcrypt cost."""
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        DATABASE_CREATE_TABLES=False,
        SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
        DEBUG=False,
    )


# =============================================================================
# ASYNC ENGINE FIXTURES (SQLite In-Memory for Tests)
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an async SQLite in-memory engine for testing.

    All tables are created on setup and dropped on teardown.
    """
    engine = create_engine(test_settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def async_session_maker(
    async_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(async_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(
    async_session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide a database session rolled back after each test.

    Example:
        async def test_create_workout(db_session):
            db_session.add(workout)
            await db_session.flush()
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


# =============================================================================
# SERVICE AND USER FIXTURES
# =============================================================================


@pytest.fixture
def user_service(db_session: AsyncSession, test_settings: Settings) -> UserService:
    return UserService(db_session, test_settings)


@pytest.fixture
def workout_service(db_session: AsyncSession, test_settings: Settings) -> WorkoutService:
    return WorkoutService(db_session, test_settings)


@pytest_asyncio.fixture(scope="function")
async def test_user(user_service: UserService) -> User:
    """A local user with password ``TEST_PASSWORD``."""
    return await user_service.create(
        username="runner",
        email="runner@example.com",
        credential_or_federated_id=TEST_PASSWORD,
        auth_method=AuthMethod.LOCAL,
    )


@pytest_asyncio.fixture(scope="function")
async def other_user(user_service: UserService) -> User:
    """A second local user, for ownership checks."""
    return await user_service.create(
        username="lifter",
        email="lifter@example.com",
        credential_or_federated_id="other_password",
        auth_method=AuthMethod.LOCAL,
    )


@pytest.fixture
def principal(test_user: User) -> Principal:
    return Principal.from_user(test_user)


@pytest.fixture
def other_principal(other_user: User) -> Principal:
    return Principal.from_user(other_user)


@pytest.fixture
def auth_headers(test_settings: Settings, test_user: User) -> dict[str, str]:
    """Authorization header carrying a real token for ``test_user``."""
    token = create_access_token(test_settings, test_user.id)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# HTTP CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest_asyncio.fixture(scope="function")
async def async_client(
    app: FastAPI,
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing API endpoints.

    Uses ASGI transport to test the FastAPI app without running a server.
    Overrides the database dependency to use the test session, so data
    created through services in a test is visible to requests.

    Example:
        async def test_public_list(async_client):
            response = await async_client.get("/api/v1/workouts/public")
            assert response.status_code == 200
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        """Override database dependency to use test session."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    try:
        transport = ASGITransport(app=cast("ASGIApp", app))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client_auth(
    async_client: AsyncClient,
    auth_headers: dict[str, str],
) -> AsyncClient:
    """Async HTTP client that sends ``test_user``'s bearer token."""
    async_client.headers.update(auth_headers)
    return async_client
