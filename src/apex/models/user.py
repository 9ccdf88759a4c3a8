"""User and password reset token models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.apex.models.base import utc_now
from src.apex.models.enums import UserRole


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    name: str = Field(max_length=100)
    role: str = Field(default=UserRole.AUDITOR.value, max_length=50)
    is_active: bool = Field(default=True)

    # Password lifecycle
    password_changed_at: datetime | None = Field(default=None)
    password_expires_at: datetime | None = Field(default=None)
    force_password_change: bool = Field(default=False)

    # Profile
    preferences: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    avatar: str | None = Field(default=None, sa_column=Column(Text, nullable=True))

    last_login_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class PasswordResetToken(SQLModel, table=True):
    """Single-use password reset token, stored as a SHA256 hash."""

    __tablename__ = "password_reset_tokens"
    __table_args__ = (Index("ix_password_reset_tokens_user_created", "user_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE")
    token_hash: str = Field(max_length=64, unique=True, index=True)
    expires_at: datetime
    used_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
