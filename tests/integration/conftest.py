"""Integration test fixtures for database operations.

These fixtures require external resources (PostgreSQL database).
"""

import asyncio
from collections.abc import AsyncGenerator, Callable

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.workflow_alerts.core import db
from src.workflow_alerts.core import redis as redis_core
from src.workflow_alerts.core.config import get_settings
from src.workflow_alerts.core.db import run_migrations_sync

TABLES = (
    "notifications",
    "workflow_subtasks",
    "workflow_steps",
    "project_workflows",
    "project_team_members",
    "projects",
    "users",
)


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Redis clients hold their event loop; drop them between tests."""
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)

    await asyncio.to_thread(run_migrations_sync)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE {', '.join(TABLES)} CASCADE"))
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> Callable[[], AsyncSession]:
    """Fresh sessions on the test engine, one per unit of work."""

    def _factory() -> AsyncSession:
        return AsyncSession(engine, expire_on_commit=False)

    return _factory


@pytest.fixture
async def db_session(
    session_factory: Callable[[], AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit; tests call `await session.commit()` to
    persist what they set up.
    """
    async with session_factory() as session:
        yield session
