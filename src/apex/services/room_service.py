"""Room status service - weekly room checks with a RAG rating."""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.apex.core.exceptions import NotFoundError
from src.apex.core.logging import get_logger
from src.apex.models import ROOM_CHECK_COUNT, RagStatus, Room, RoomCheck
from src.apex.models.base import utc_now
from src.apex.repositories import RoomCheckRepository, RoomRepository
from src.apex.schemas.room import RoomCheckCreate, RoomCheckRead, RoomRead, RoomUpsert

logger = get_logger(__name__)


def check_flags(check: RoomCheck) -> list[bool]:
    return [bool(getattr(check, f"check{i}")) for i in range(1, ROOM_CHECK_COUNT + 1)]


def to_check_read(check: RoomCheck) -> RoomCheckRead:
    return RoomCheckRead(
        id=check.id,
        room_id=check.room_id,
        rag_status=check.rag_status,
        limited_functionality=check.limited_functionality,
        non_functional_reason=check.non_functional_reason,
        checks=check_flags(check),
        notes=check.notes,
        checked_by=check.checked_by,
        checked_at=check.checked_at,
    )


def to_room_read(room: Room, latest: RoomCheck | None) -> RoomRead:
    """Room with its latest check; never-checked rooms read as green."""
    return RoomRead(
        room_id=room.room_id,
        name=room.name,
        schedule_day=room.schedule_day,
        schedule_day_name=room.schedule_day_name,
        rag_status=latest.rag_status if latest else RagStatus.GREEN.value,
        limited_functionality=latest.limited_functionality if latest else False,
        non_functional_reason=latest.non_functional_reason if latest else None,
        last_checked_at=latest.checked_at if latest else None,
        last_checked_by=latest.checked_by if latest else None,
        checks=check_flags(latest) if latest else [False] * ROOM_CHECK_COUNT,
    )


class RoomService:
    def __init__(
        self,
        room_repo: RoomRepository,
        check_repo: RoomCheckRepository,
        session: AsyncSession,
    ):
        self.room_repo = room_repo
        self.check_repo = check_repo
        self.session = session

    async def _get_room(self, room_id: str) -> Room:
        room = await self.room_repo.get_by_room_id(room_id)
        if room is None:
            raise NotFoundError(f"Room {room_id} not found")
        return room

    async def list_rooms(self) -> list[RoomRead]:
        rooms = await self.room_repo.list_active()
        latest = await self.check_repo.latest_by_room([room.room_id for room in rooms])
        return [to_room_read(room, latest.get(room.room_id)) for room in rooms]

    async def upsert_room(self, data: RoomUpsert) -> RoomRead:
        try:
            room = await self.room_repo.upsert(
                room_id=data.room_id,
                name=data.name.strip(),
                schedule_day=data.schedule_day,
                day_name=data.day_name(),
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        latest = await self.check_repo.latest_by_room([room.room_id])
        logger.info("Room saved", room_id=room.room_id)
        return to_room_read(room, latest.get(room.room_id))

    async def record_check(self, room_id: str, data: RoomCheckCreate, checked_by: str) -> RoomRead:
        room = await self._get_room(room_id)
        flags = list(data.checks) + [False] * (ROOM_CHECK_COUNT - len(data.checks))
        check = RoomCheck(
            room_id=room.room_id,
            rag_status=data.rag_status.value,
            limited_functionality=data.limited_functionality,
            non_functional_reason=data.non_functional_reason,
            notes=data.notes,
            checked_by=data.checked_by or checked_by,
            checked_at=utc_now(),
            **{f"check{i}": flag for i, flag in enumerate(flags, start=1)},
        )
        self.check_repo.add(check)

        try:
            room.updated_at = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Room check recorded", room_id=room.room_id, rag_status=check.rag_status)
        return to_room_read(room, check)

    async def history(self, room_id: str, limit: int = 50) -> Sequence[RoomCheckRead]:
        await self._get_room(room_id)
        checks = await self.check_repo.history(room_id, limit=limit)
        return [to_check_read(check) for check in checks]

    async def delete_room(self, room_id: str) -> None:
        """Soft delete; the check history is kept."""
        room = await self._get_room(room_id)
        try:
            room.deleted_at = utc_now()
            room.updated_at = room.deleted_at
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Room deleted", room_id=room_id)
