from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.apex.models import ROOM_CHECK_COUNT, RagStatus

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class RoomUpsert(BaseModel):
    room_id: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    schedule_day: int = Field(ge=0, le=6, description="0 = Sunday")
    schedule_day_name: str | None = Field(default=None, max_length=20)

    def day_name(self) -> str:
        return self.schedule_day_name or DAY_NAMES[self.schedule_day]


class RoomCheckCreate(BaseModel):
    rag_status: RagStatus = RagStatus.GREEN
    limited_functionality: bool = False
    non_functional_reason: str | None = Field(default=None, max_length=1000)
    checks: list[bool] = Field(default_factory=list, max_length=ROOM_CHECK_COUNT)
    notes: str | None = Field(default=None, max_length=5000)
    checked_by: str | None = Field(default=None, max_length=255)

    @field_validator("rag_status", mode="before")
    @classmethod
    def normalize_rag(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v


class RoomCheckRead(BaseModel):
    id: UUID
    room_id: str
    rag_status: str
    limited_functionality: bool
    non_functional_reason: str | None
    checks: list[bool]
    notes: str | None
    checked_by: str | None
    checked_at: datetime


class RoomRead(BaseModel):
    room_id: str
    name: str
    schedule_day: int
    schedule_day_name: str
    rag_status: str
    limited_functionality: bool
    non_functional_reason: str | None
    last_checked_at: datetime | None
    last_checked_by: str | None
    checks: list[bool]
