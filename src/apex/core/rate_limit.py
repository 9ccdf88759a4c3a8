"""Rate limiting for authentication endpoints.

Uses the configured storage URI (e.g. Redis) for distributed limits and
falls back to in-memory storage, which is per-process only.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.apex.core.config import get_settings
from src.apex.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Key limits on the client IP only.

    Never include user-controlled headers here, rotating them would give
    every request a fresh bucket.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the limiter, disabled in the testing environment."""
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    if settings.rate_limit_storage_uri:
        logger.info("Rate limiter using shared storage backend")
        return Limiter(key_func=get_rate_limit_key, storage_uri=settings.rate_limit_storage_uri)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


def auth_rate_limit() -> str:
    """Limit string applied to login and password endpoints."""
    return get_settings().auth_rate_limit


limiter = create_limiter()
