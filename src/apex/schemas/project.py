"""Project schemas for API request/response."""

import re
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.apex.models import ProjectStatus

_PROJECT_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_\-.]{0,49}$")


def _strip_or_none(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class ProjectFields(BaseModel):
    """Editable project fields shared by create and update."""

    client: str | None = Field(default=None, max_length=255)
    project_type: str | None = Field(default=None, max_length=100)
    priority: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=4000)
    budget: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    estimated_budget: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    actual_budget: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    cost_center: str | None = Field(default=None, max_length=100)
    purchase_order: str | None = Field(default=None, max_length=100)
    progress: int | None = Field(default=None, ge=0, le=100)
    start_date: datetime | None = None
    end_date: datetime | None = None
    request_date: datetime | None = None
    due_date: datetime | None = None
    requestor_info: dict[str, Any] | None = None
    site_location: str | None = Field(default=None, max_length=255)
    business_line: str | None = Field(default=None, max_length=255)
    parent_project_id: str | None = Field(default=None, max_length=50)

    @field_validator("client", "project_type", "priority", "description", "parent_project_id")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip_or_none(v)

    @field_validator("start_date", "end_date", "request_date", "due_date")
    @classmethod
    def to_naive_utc(cls, v: datetime | None) -> datetime | None:
        """Columns are TIMESTAMP WITHOUT TIME ZONE holding UTC."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(UTC).replace(tzinfo=None)
        return v


class ProjectCreate(ProjectFields):
    id: str = Field(min_length=1, max_length=50, examples=["WTB_001"])
    name: str = Field(min_length=1, max_length=255)
    status: ProjectStatus = ProjectStatus.PLANNING
    tasks: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        if not _PROJECT_ID_PATTERN.match(v):
            raise ValueError(
                "Project id must start with a letter or digit and contain only "
                "letters, digits, '_', '-' or '.'"
            )
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or whitespace only")
        return v


class ProjectUpdate(ProjectFields):
    """Partial update; only fields present in the request are applied.

    Send `parent_project_id: null` to detach a child from its parent. When
    `version` is given it must match the stored version.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    status: ProjectStatus | None = None
    version: int | None = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Project name cannot be empty or whitespace only")
        return v


class ProjectRead(BaseModel):
    id: str
    name: str
    client: str | None
    project_type: str | None
    status: str
    priority: str | None
    description: str | None
    budget: float
    estimated_budget: float
    actual_budget: float
    cost_center: str | None
    purchase_order: str | None
    progress: int
    actual_hours: float
    start_date: datetime | None
    end_date: datetime | None
    request_date: datetime | None
    due_date: datetime | None
    requestor_info: dict[str, Any] | None
    site_location: str | None
    business_line: str | None
    parent_project_id: str | None
    tasks: list[dict[str, Any]]
    time_entries: list[dict[str, Any]]
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectHealthRead(BaseModel):
    project_id: str
    health: str
    progress: int
    task_count: int
    overdue_tasks: int


class ProjectStatsRead(BaseModel):
    total: int
    by_status: dict[str, int]
    total_budget: float
    total_actual: float
    budget_variance: float
    average_progress: int

    model_config = {"from_attributes": True}
