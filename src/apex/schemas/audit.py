from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from src.apex.models import AuditCategory, AuditSeverity


class AuditLogCreate(BaseModel):
    """Event reported by a client."""

    action: str = Field(min_length=1, max_length=500)
    resource: str | None = Field(default=None, max_length=255)
    details: str | None = Field(default=None, max_length=5000)
    project_id: str | None = Field(default=None, max_length=50)
    task_id: str | None = Field(default=None, max_length=100)
    category: AuditCategory = AuditCategory.GENERAL
    severity: AuditSeverity = AuditSeverity.INFO


class AuditLogRead(BaseModel):
    id: UUID
    user_id: UUID | None
    user: str | None
    action: str
    resource: str | None
    details: dict[str, Any] | None
    project_id: str | None
    task_id: str | None
    category: str
    severity: str
    ip_address: str | None
    user_agent: str | None
    request_id: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditLogAccepted(BaseModel):
    recorded: bool
    id: UUID | None = None
