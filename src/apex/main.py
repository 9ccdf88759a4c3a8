import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException, Security, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from src.apex.api.middlewares import setup_middlewares
from src.apex.api.v1.router import api_router
from src.apex.core.config import Settings, get_settings
from src.apex.core.db import dispose_engine, get_session, run_migrations_async
from src.apex.core.exceptions import setup_exception_handlers
from src.apex.core.logging import get_logger, setup_logging
from src.apex.core.rate_limit import limiter

logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "auth", "description": "Login, registration and password resets"},
    {"name": "users", "description": "User accounts, preferences and avatars"},
    {"name": "roles", "description": "Role and permission catalog"},
    {"name": "projects", "description": "Projects, child projects and rollups"},
    {"name": "tasks", "description": "Project tasks, notes and time entries"},
    {"name": "room-status", "description": "Weekly room checks"},
    {"name": "audit", "description": "Audit trail"},
]

_metrics_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

HealthState = Literal["healthy", "unhealthy"]


class ServiceHealth(BaseModel):
    status: HealthState
    database: HealthState
    service: str
    version: str
    timestamp: datetime


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings = get_settings()
    setup_logging(settings.debug, settings.app_env)
    logger.info("APEX API starting", app=settings.app_name, env=settings.app_env)

    if settings.run_migrations_on_startup:
        await run_migrations_async()

    yield

    await dispose_engine()
    logger.info("APEX API stopped")


async def check_database() -> None:
    async with get_session() as session:
        await session.execute(text("SELECT 1"))


async def require_metrics_key(api_key: str | None = Security(_metrics_key_header)) -> None:
    expected = get_settings().metrics_api_key
    if expected and not (api_key and secrets.compare_digest(api_key, expected)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing metrics API key",
        )


def _setup_metrics(app: FastAPI, settings: Settings) -> None:
    """Expose Prometheus request metrics; probe and scrape traffic is not counted."""
    instrumentator = Instrumentator(excluded_handlers=["/health", "/metrics"]).instrument(app)
    guards = [Depends(require_metrics_key)] if settings.metrics_api_key else None
    instrumentator.expose(app, endpoint="/metrics", dependencies=guards)


def create_app() -> FastAPI:
    settings = get_settings()
    docs_enabled = settings.enable_openapi

    app = FastAPI(
        title=settings.app_name,
        description="Project tracking with parent/child rollups, time entries and room checks",
        version=settings.app_version,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if docs_enabled else None,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
    )

    setup_exception_handlers(app)
    app.state.limiter = limiter
    app.add_exception_handler(
        RateLimitExceeded, _rate_limit_exceeded_handler  # type: ignore[arg-type]
    )
    setup_middlewares(app, settings)
    app.include_router(api_router)
    _setup_metrics(app, settings)

    @app.get("/health", tags=["health"], response_model=ServiceHealth)
    async def health() -> JSONResponse:
        """Liveness plus a database round trip; 503 when the database is unreachable."""
        database: HealthState = "healthy"
        try:
            await check_database()
        except Exception as e:
            logger.warning("Health check database failure", error=str(e))
            database = "unhealthy"

        report = ServiceHealth(
            status=database,
            database=database,
            service=settings.app_name,
            version=settings.app_version,
            timestamp=datetime.now(UTC),
        )
        return JSONResponse(
            content=report.model_dump(mode="json"),
            status_code=(
                status.HTTP_200_OK
                if database == "healthy"
                else status.HTTP_503_SERVICE_UNAVAILABLE
            ),
        )

    return app


app = create_app()
