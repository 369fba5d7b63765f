"""Database engine, session management and store-call guarding.

Provides async engine and session factories built from an explicit
Settings object, the request-scoped session dependency, and
``store_operation``, which bounds every store round-trip with a timeout and
turns connection failures into StoreUnavailableError.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from workout_tracker.core.exceptions import StoreUnavailableError

if TYPE_CHECKING:
    from workout_tracker.core.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured store.

    PostgreSQL gets a sized connection pool; SQLite in-memory databases share
    one connection so every session sees the same data.
    """
    if settings.is_sqlite:
        if ":memory:" in settings.DATABASE_URL:
            return create_async_engine(
                settings.DATABASE_URL,
                echo=settings.DEBUG,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)

    return create_async_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.STORE_TIMEOUT_SECONDS,
        echo=settings.DEBUG,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession]:
    """Get database session dependency for FastAPI.

    Yields an async session from the factory stored on the application and
    ensures cleanup after the request. Commits on success, rolls back on
    exception.

    Example:
        @router.get("/workouts")
        async def list_workouts(db: AsyncSession = Depends(get_db)):
            ...
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def store_operation(operation: str, timeout: float) -> AsyncIterator[None]:
    """Bound a store round-trip and translate connectivity failures.

    Args:
        operation: Name used in the error (e.g. "get_workout")
        timeout: Seconds before the call is abandoned

    Raises:
        StoreUnavailableError: On timeout or a connection-level driver error.

    Example:
        async with store_operation("get_workout", settings.STORE_TIMEOUT_SECONDS):
            result = await session.execute(query)
    """
    try:
        async with asyncio.timeout(timeout):
            yield
    except TimeoutError as e:
        raise StoreUnavailableError(operation, f"timed out after {timeout}s") from e
    except (OperationalError, InterfaceError, DisconnectionError) as e:
        raise StoreUnavailableError(operation, type(e).__name__) from e


__all__ = [
    "create_engine",
    "create_session_factory",
    "get_db",
    "store_operation",
]
