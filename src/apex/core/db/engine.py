"""Async engine for the APEX Postgres database.

One engine per process, created lazily on first use and disposed by the
application lifespan. Repositories never see it directly, only sessions.
"""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.apex.core.config import Settings, get_settings

# ssl mode -> (verify server certificate, verify hostname)
_SSL_MODES: dict[str, tuple[bool, bool]] = {
    "prefer": (False, False),
    "require": (False, False),
    "verify-ca": (True, False),
    "verify-full": (True, True),
}

_engine: AsyncEngine | None = None


def build_ssl_context(ssl_mode: str) -> ssl.SSLContext | None:
    """Translate a libpq-style sslmode into an SSLContext for asyncpg."""
    if ssl_mode == "disable":
        return None
    try:
        verify_cert, verify_host = _SSL_MODES[ssl_mode]
    except KeyError:
        raise ValueError(f"Unsupported database_ssl_mode: {ssl_mode}") from None
    context = ssl.create_default_context()
    context.check_hostname = verify_host
    context.verify_mode = ssl.CERT_REQUIRED if verify_cert else ssl.CERT_NONE
    return context


def _connect_args(settings: Settings) -> dict[str, Any]:
    args: dict[str, Any] = {"server_settings": {"application_name": "apex-api"}}
    context = build_ssl_context(settings.database_ssl_mode)
    if context is not None:
        args["ssl"] = context
    return args


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            connect_args=_connect_args(settings),
        )
    return _engine


async def dispose_engine() -> None:
    global _engine
    if _engine is None:
        return
    engine, _engine = _engine, None
    await engine.dispose()
