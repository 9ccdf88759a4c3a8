from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "APEX Backend API"
    app_version: str = "1.0.0"
    app_env: Literal["development", "testing", "production"] = "development"
    debug: bool = False
    enable_openapi: bool = True

    # Security
    log_user_emails: bool = False
    csp_policy: str = (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' cdn.jsdelivr.net cdnjs.cloudflare.com; "
        "style-src 'self' 'unsafe-inline' cdn.jsdelivr.net cdnjs.cloudflare.com "
        "fonts.googleapis.com; "
        "font-src 'self' fonts.gstatic.com cdnjs.cloudflare.com; "
        "img-src 'self' data: blob:; "
        "connect-src 'self'; "
        "frame-ancestors 'none'"
    )

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: Literal["disable", "prefer", "require", "verify-ca", "verify-full"] = (
        "prefer"
    )
    run_migrations_on_startup: bool = False

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1
    password_max_age_days: int = 60
    temporary_password_max_age_days: int = 7
    password_reset_expire_minutes: int = 30
    password_reset_max_requests_per_hour: int = 10

    # Rate limiting
    auth_rate_limit: str = "15 per 15 minutes"
    rate_limit_storage_uri: str | None = None  # e.g. "redis://localhost:6379/0"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 10
    app_url: str = "http://localhost:3000"

    # Projects
    project_id_prefix: str = "WTB_"  # Empty string lists every project
    task_write_max_attempts: int = Field(default=3, ge=1)

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if len(v) < 32 or v.startswith("change-this"):
            raise ValueError(
                "JWT_SECRET_KEY must be a random secret of at least 32 characters, "
                "e.g. the output of: openssl rand -hex 32"
            )
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Credentials are always allowed, so every origin must be explicit."""
        if "*" in v:
            raise ValueError("CORS_ORIGINS must list explicit origins; '*' is not accepted")
        return [origin.rstrip("/") for origin in v]


@lru_cache
def get_settings() -> Settings:
    return Settings()
