"""Migration runner shared by startup and tooling."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

from alembic import command
from alembic.config import Config

from src.apex.core.logging import get_logger

logger = get_logger(__name__)


def run_migrations_sync(config_path: str = "alembic.ini") -> None:
    """Upgrade the database to the latest revision."""
    alembic_cfg = Config(config_path)
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations applied", config=config_path)


async def run_migrations_async(config_path: str = "alembic.ini") -> None:
    """Run migrations from async context.

    Alembic drives its own event loop-free engine, so it runs in a worker thread.
    """
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=1) as pool:
        await loop.run_in_executor(pool, run_migrations_sync, config_path)
