"""Task, note and time entry schemas.

Tasks are stored as JSON documents with camelCase keys; the same keys are
used on the wire. Unknown keys are kept so clients can attach their own
task attributes.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

TaskId = str | int


class TaskBase(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class TaskCreate(TaskBase):
    id: TaskId | None = None
    name: str = Field(min_length=1, max_length=500)
    status: str = Field(default="pending", max_length=50)
    estimated_hours: float = Field(default=0, ge=0, alias="estimatedHours")
    actual_hours: float = Field(default=0, ge=0, alias="actualHours")
    parent_task_id: TaskId | None = Field(default=None, alias="parentTaskId")
    notes_thread: list[dict[str, Any]] = Field(default_factory=list, alias="notesThread")
    subtasks: list[dict[str, Any]] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task name cannot be empty or whitespace only")
        return v


class TaskUpdate(TaskBase):
    """Fields to merge into an existing task; the id cannot be changed."""

    name: str | None = Field(default=None, min_length=1, max_length=500)
    status: str | None = Field(default=None, max_length=50)
    estimated_hours: float | None = Field(default=None, ge=0, alias="estimatedHours")
    actual_hours: float | None = Field(default=None, ge=0, alias="actualHours")
    parent_task_id: TaskId | None = Field(default=None, alias="parentTaskId")
    subtasks: list[dict[str, Any]] | None = None

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_unset=True)
        data.pop("id", None)
        return data


class TaskNoteCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    author: str | None = Field(default=None, max_length=255)


class TimeEntryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_id: TaskId = Field(alias="taskId")
    # Whole cents of an hour; task totals are kept to the same precision
    hours: Decimal = Field(gt=0, le=24, decimal_places=2)
    employee: str | None = Field(default=None, max_length=255)
    date: datetime | None = None
    description: str | None = Field(default=None, max_length=2000)


class TimeEntryResult(BaseModel):
    entry: dict[str, Any]
    task: dict[str, Any]
    parent_task: dict[str, Any] | None
    project_actual_hours: float
