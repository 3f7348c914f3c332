"""Shared pytest fixtures for FoodOrderAPI tests."""

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.database import Base, get_db
from app.main import app


@pytest.fixture
async def client():
    """Create async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def mock_db() -> Iterator[AsyncMock]:
    """Replace the request-scoped session with an AsyncMock.

    Route tests that also override a feature service never reach the
    database; the mock only satisfies the ``get_db`` dependency.
    """
    session = AsyncMock(spec=AsyncSession)
    app.dependency_overrides[get_db] = lambda: session
    yield session
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def override():
    """Override a FastAPI dependency for the duration of a test."""
    overridden: list = []

    def _override(dependency, value):
        app.dependency_overrides[dependency] = lambda: value
        overridden.append(dependency)
        return value

    yield _override

    for dependency in overridden:
        app.dependency_overrides.pop(dependency, None)


@pytest.fixture
async def db_session():
    """Create async database session for integration tests.

    This fixture creates all tables, provides a session, and cleans up after.
    Requires PostgreSQL to be running at DATABASE_URL.
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    # Cleanup: drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
