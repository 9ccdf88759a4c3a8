"""Integration test fixtures backed by a real PostgreSQL database.

Migrations are applied once per test; every project a test creates uses
an id starting with IT_ and is removed afterwards.
"""

import asyncio
from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.apex.core import db
from src.apex.core.config import get_settings
from src.apex.core.db import run_migrations_sync
from src.apex.repositories import ProjectRepository


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)

    await asyncio.to_thread(run_migrations_sync)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.execute(
            text("UPDATE projects SET parent_project_id = NULL WHERE id LIKE 'IT\\_%'")
        )
        await conn.execute(text("DELETE FROM projects WHERE id LIKE 'IT\\_%'"))
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Async session; tests commit explicitly when they need rows persisted."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def project_id() -> str:
    return f"IT_{uuid4().hex[:12]}"


@pytest.fixture
def repo(db_session: AsyncSession) -> ProjectRepository:
    return ProjectRepository(db_session)
