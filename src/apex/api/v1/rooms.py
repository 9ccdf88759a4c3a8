"""Room status endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.apex.api.dependencies import AuditServiceDep, CurrentUser, RoomEditor, RoomServiceDep
from src.apex.models import AuditAction, AuditCategory
from src.apex.schemas.room import RoomCheckCreate, RoomCheckRead, RoomRead, RoomUpsert

router = APIRouter(prefix="/room-status", tags=["room-status"])


@router.get("", response_model=list[RoomRead])
async def list_rooms(current_user: CurrentUser, service: RoomServiceDep) -> list[RoomRead]:
    """All active rooms with their latest check."""
    return await service.list_rooms()


@router.post("", response_model=RoomRead)
async def upsert_room(
    data: RoomUpsert,
    current_user: RoomEditor,
    service: RoomServiceDep,
    audit: AuditServiceDep,
) -> RoomRead:
    """Create a room or update its name and schedule. Restores a deleted room."""
    room = await service.upsert_room(data)
    await audit.log_success(
        AuditAction.ROOM_UPSERT,
        AuditCategory.GENERAL,
        actor=current_user,
        resource="room",
        details={"room_id": room.room_id, "schedule_day": room.schedule_day},
    )
    return room


@router.post(
    "/{room_id}/checks",
    response_model=RoomRead,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Room not found"}},
)
async def record_room_check(
    room_id: str,
    data: RoomCheckCreate,
    current_user: RoomEditor,
    service: RoomServiceDep,
    audit: AuditServiceDep,
) -> RoomRead:
    room = await service.record_check(room_id, data, checked_by=current_user.name)
    await audit.log_success(
        AuditAction.ROOM_CHECK,
        AuditCategory.GENERAL,
        actor=current_user,
        resource="room",
        details={"room_id": room_id, "rag_status": room.rag_status},
    )
    return room


@router.get("/{room_id}/history", response_model=list[RoomCheckRead])
async def room_check_history(
    room_id: str,
    current_user: CurrentUser,
    service: RoomServiceDep,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> list[RoomCheckRead]:
    return list(await service.history(room_id, limit=limit))


@router.delete(
    "/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Room not found"}},
)
async def delete_room(
    room_id: str,
    current_user: RoomEditor,
    service: RoomServiceDep,
    audit: AuditServiceDep,
) -> None:
    await service.delete_room(room_id)
    await audit.log_success(
        AuditAction.ROOM_DELETE,
        AuditCategory.GENERAL,
        actor=current_user,
        resource="room",
        details={"room_id": room_id},
    )
