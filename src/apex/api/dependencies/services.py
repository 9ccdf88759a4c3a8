"""Service factory dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.apex.api.dependencies.db import DBSession
from src.apex.api.dependencies.repositories import (
    ProjectRepo,
    ResetTokenRepo,
    RoomCheckRepo,
    RoomRepo,
    UserRepo,
)
from src.apex.core.config import get_settings
from src.apex.core.db.engine import get_engine
from src.apex.repositories import AuditLogRepository
from src.apex.services.audit_service import AuditService
from src.apex.services.auth_service import AuthService
from src.apex.services.project_service import ProjectService
from src.apex.services.rollup import RollupService
from src.apex.services.room_service import RoomService
from src.apex.services.task_service import TaskService
from src.apex.services.user_service import UserService


def get_auth_service(
    user_repo: UserRepo,
    reset_token_repo: ResetTokenRepo,
    session: DBSession,
) -> AuthService:
    return AuthService(user_repo, reset_token_repo, session)


def get_user_service(user_repo: UserRepo, session: DBSession) -> UserService:
    return UserService(user_repo, session)


def get_project_service(project_repo: ProjectRepo, session: DBSession) -> ProjectService:
    return ProjectService(
        project_repo,
        session,
        id_prefix=get_settings().project_id_prefix,
        rollup_service=RollupService(project_repo),
    )


def get_task_service(project_repo: ProjectRepo, session: DBSession) -> TaskService:
    return TaskService(
        project_repo,
        session,
        rollup_service=RollupService(project_repo),
        max_attempts=get_settings().task_write_max_attempts,
    )


def get_room_service(
    room_repo: RoomRepo,
    check_repo: RoomCheckRepo,
    session: DBSession,
) -> RoomService:
    return RoomService(room_repo, check_repo, session)


async def get_audit_service() -> AsyncGenerator[AuditService]:
    """Audit service with its own isolated session.

    Commits independently from business transactions, so audit logs are
    kept even when the main transaction rolls back.
    """
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        yield AuditService(AuditLogRepository(session), session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
RoomServiceDep = Annotated[RoomService, Depends(get_room_service)]
AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]
