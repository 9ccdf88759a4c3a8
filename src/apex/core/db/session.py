"""Sessions bound to the APEX engine."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.apex.core.db.engine import get_engine


@cache
def _sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Loaded objects stay usable after commit; services flush explicitly.
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@asynccontextmanager
async def get_session(engine: AsyncEngine | None = None) -> AsyncGenerator[AsyncSession]:
    """Open a session; anything the caller did not commit is rolled back on exit."""
    async with _sessionmaker(engine or get_engine())() as session:
        yield session
