"""Audit log model for tracking user and system actions."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.apex.models.base import utc_now
from src.apex.models.enums import AuditCategory, AuditSeverity


class AuditAction(str, Enum):
    """Audit actions recorded by the server itself."""

    # Auth
    USER_LOGIN = "user.login"
    USER_REGISTER = "user.register"
    PASSWORD_RESET_REQUEST = "password.reset_request"
    PASSWORD_RESET = "password.reset"
    PASSWORD_CHANGE = "password.change"

    # Users
    USER_CREATE = "user.create"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"
    USER_PASSWORD_ADMIN_RESET = "user.password_admin_reset"

    # Projects
    PROJECT_CREATE = "project.create"
    PROJECT_UPDATE = "project.update"
    PROJECT_DELETE = "project.delete"
    TASK_CREATE = "task.create"
    TASK_UPDATE = "task.update"
    TASK_DELETE = "task.delete"
    TIME_ENTRY_CREATE = "time_entry.create"

    # Rooms
    ROOM_UPSERT = "room.upsert"
    ROOM_CHECK = "room.check"
    ROOM_DELETE = "room.delete"


class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_created", "created_at"),
        Index("ix_audit_logs_category_created", "category", "created_at"),
        Index("ix_audit_logs_project", "project_id"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # Who
    user_id: UUID | None = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
    user: str | None = Field(default=None, max_length=255)  # display name or email

    # What
    action: str = Field(max_length=500)
    resource: str | None = Field(default=None, max_length=255)
    details: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )
    project_id: str | None = Field(default=None, max_length=50)
    task_id: str | None = Field(default=None, max_length=100)
    category: str = Field(default=AuditCategory.GENERAL.value, max_length=20)
    severity: str = Field(default=AuditSeverity.INFO.value, max_length=20)

    # Request metadata
    ip_address: str | None = Field(max_length=45, default=None)
    user_agent: str | None = Field(max_length=500, default=None)
    request_id: str | None = Field(max_length=36, default=None)

    created_at: datetime = Field(default_factory=utc_now)
