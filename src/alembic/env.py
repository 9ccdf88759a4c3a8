"""Alembic environment for the APEX schema.

Migrations run over a synchronous psycopg2 connection derived from the
application's asyncpg URL, so the same DATABASE_URL drives both.
"""

import os
from logging.config import fileConfig
from typing import Any

from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel

from alembic import context
from src.apex.core.config import get_settings

# Registers every table on SQLModel.metadata
from src.apex.models import (  # noqa: F401
    AuditLog,
    PasswordResetToken,
    Project,
    Room,
    RoomCheck,
    User,
)

config = context.config
if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = SQLModel.metadata


def sync_database_url() -> str:
    return get_settings().database_url.replace("+asyncpg", "+psycopg2", 1)


def _run(**options: Any) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        **options,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    _run(url=sync_database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    engine = create_engine(sync_database_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _run(connection=connection)
    finally:
        engine.dispose()
