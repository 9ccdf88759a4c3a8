"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.apex.api.dependencies.db import DBSession
from src.apex.repositories import (
    PasswordResetTokenRepository,
    ProjectRepository,
    RoomCheckRepository,
    RoomRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_reset_token_repository(session: DBSession) -> PasswordResetTokenRepository:
    return PasswordResetTokenRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_room_repository(session: DBSession) -> RoomRepository:
    return RoomRepository(session)


def get_room_check_repository(session: DBSession) -> RoomCheckRepository:
    return RoomCheckRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
ResetTokenRepo = Annotated[PasswordResetTokenRepository, Depends(get_reset_token_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
RoomRepo = Annotated[RoomRepository, Depends(get_room_repository)]
RoomCheckRepo = Annotated[RoomCheckRepository, Depends(get_room_check_repository)]
