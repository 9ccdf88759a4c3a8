"""Repositories for rooms and their check history."""

from collections.abc import Sequence

from sqlalchemy.dialects.postgresql import insert
from sqlmodel import select

from src.apex.models import Room, RoomCheck
from src.apex.models.base import utc_now
from src.apex.repositories.base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    model = Room

    async def get_by_room_id(self, room_id: str, *, include_deleted: bool = False) -> Room | None:
        query = select(Room).where(Room.room_id == room_id)
        if not include_deleted:
            query = query.where(Room.deleted_at == None)  # noqa: E711
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_active(self) -> Sequence[Room]:
        result = await self.session.execute(
            select(Room)
            .where(Room.deleted_at == None)  # noqa: E711
            .order_by(Room.schedule_day, Room.name)
        )
        return result.scalars().all()

    async def upsert(self, room_id: str, name: str, schedule_day: int, day_name: str) -> Room:
        """Insert or update by room_id; a soft-deleted room is restored."""
        now = utc_now()
        stmt = insert(Room).values(
            room_id=room_id,
            name=name,
            schedule_day=schedule_day,
            schedule_day_name=day_name,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Room.room_id],
            set_={
                "name": stmt.excluded.name,
                "schedule_day": stmt.excluded.schedule_day,
                "schedule_day_name": stmt.excluded.schedule_day_name,
                "deleted_at": None,
                "updated_at": now,
            },
        ).returning(Room)
        result = await self.session.execute(
            select(Room).from_statement(stmt).execution_options(populate_existing=True)
        )
        return result.scalar_one()


class RoomCheckRepository(BaseRepository[RoomCheck]):
    model = RoomCheck

    async def latest_by_room(self, room_ids: Sequence[str]) -> dict[str, RoomCheck]:
        """Most recent check per room."""
        if not room_ids:
            return {}
        result = await self.session.execute(
            select(RoomCheck)
            .where(RoomCheck.room_id.in_(room_ids))  # type: ignore[attr-defined]
            .distinct(RoomCheck.room_id)
            .order_by(RoomCheck.room_id, RoomCheck.checked_at.desc())  # type: ignore[attr-defined]
        )
        return {check.room_id: check for check in result.scalars().all()}

    async def history(self, room_id: str, limit: int = 50) -> Sequence[RoomCheck]:
        result = await self.session.execute(
            select(RoomCheck)
            .where(RoomCheck.room_id == room_id)
            .order_by(RoomCheck.checked_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return result.scalars().all()
