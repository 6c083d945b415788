"""Pytest configuration and shared fixtures.

This module provides:
- A fresh in-memory SQLite database per test (aiosqlite, StaticPool)
- Async session fixtures for repository/service tests
- FastAPI test clients for route tests, with and without the admin token
"""

# Set environment variables BEFORE any imports that trigger Settings validation
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_API_TOKEN", "test-admin-token")

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from core.config import clear_settings_cache
from core.database import Base, configure_sqlite_engine, create_session_maker
from core.wide_event import init_wide_event

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_TOKEN = os.environ["ADMIN_API_TOKEN"]


@pytest.fixture(autouse=True)
def setup_wide_event():
    """Initialize wide_event context for all tests.

    In production this is done by RequestTimingMiddleware.
    """
    init_wide_event()
    yield


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None]:
    """Reset settings cache before each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine]:
    """Create a fresh in-memory database engine for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    configure_sqlite_engine(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for each test. Rolled back afterwards."""
    session_maker = create_session_maker(test_engine)

    async with session_maker() as session:
        yield session
        await session.rollback()


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def app(test_engine: AsyncEngine) -> AsyncGenerator[FastAPI]:
    """FastAPI app wired to the test database (lifespan not run).

    Route tests seed data through ``app.state.session_maker`` and commit,
    since the app and the seed share the single in-memory connection.
    """
    from main import app as fastapi_app

    fastapi_app.state.engine = test_engine
    fastapi_app.state.session_maker = create_session_maker(test_engine)
    fastapi_app.state.init_done = True
    fastapi_app.state.init_error = None

    yield fastapi_app


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client without the admin token."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def admin_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client that sends the configured X-Admin-Token."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Admin-Token": ADMIN_TOKEN},
    ) as ac:
        yield ac
