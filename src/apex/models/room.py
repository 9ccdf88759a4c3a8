"""Room status models: rooms on a weekly check schedule and their check history."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Column, Index, Text
from sqlmodel import Field, SQLModel

from src.apex.models.base import utc_now
from src.apex.models.enums import RagStatus

ROOM_CHECK_COUNT = 5


class Room(SQLModel, table=True):
    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("schedule_day BETWEEN 0 AND 6", name="ck_rooms_schedule_day"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    room_id: str = Field(max_length=100, unique=True, index=True)
    name: str = Field(max_length=255)
    schedule_day: int = Field(default=0)  # 0 = Sunday
    schedule_day_name: str = Field(max_length=20)
    deleted_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RoomCheck(SQLModel, table=True):
    __tablename__ = "room_check_history"
    __table_args__ = (Index("ix_room_check_history_room_checked", "room_id", "checked_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    room_id: str = Field(max_length=100, foreign_key="rooms.room_id")
    rag_status: str = Field(default=RagStatus.GREEN.value, max_length=10)
    limited_functionality: bool = Field(default=False)
    non_functional_reason: str | None = Field(default=None, max_length=1000)
    check1: bool = Field(default=False)
    check2: bool = Field(default=False)
    check3: bool = Field(default=False)
    check4: bool = Field(default=False)
    check5: bool = Field(default=False)
    notes: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    checked_by: str | None = Field(default=None, max_length=255)
    checked_at: datetime = Field(default_factory=utc_now)
