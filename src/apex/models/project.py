"""Project model.

Tasks and time entries are kept as JSON documents on the project row and
rewritten whole; `version` guards those rewrites against lost updates.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.apex.models.base import utc_now
from src.apex.models.enums import ProjectStatus


class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_parent_project_id", "parent_project_id"),
        Index("ix_projects_created_at", "created_at"),
    )

    id: str = Field(primary_key=True, max_length=50)
    name: str = Field(max_length=255)
    client: str | None = Field(default=None, max_length=255)
    project_type: str | None = Field(default=None, max_length=100)
    status: str = Field(default=ProjectStatus.PLANNING.value, max_length=50)
    priority: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=4000)

    # Money
    budget: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    estimated_budget: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    actual_budget: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    cost_center: str | None = Field(default=None, max_length=100)
    purchase_order: str | None = Field(default=None, max_length=100)

    # Progress
    progress: int = Field(default=0)
    actual_hours: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)

    # Schedule
    start_date: datetime | None = Field(default=None)
    end_date: datetime | None = Field(default=None)
    request_date: datetime | None = Field(default=None)
    due_date: datetime | None = Field(default=None)

    # Requesting side
    requestor_info: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )
    site_location: str | None = Field(default=None, max_length=255)
    business_line: str | None = Field(default=None, max_length=255)

    # Hierarchy: a child ("location") rolls its figures up into its parent
    parent_project_id: str | None = Field(default=None, foreign_key="projects.id", max_length=50)

    # Documents
    tasks: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )
    time_entries: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )

    version: int = Field(default=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
