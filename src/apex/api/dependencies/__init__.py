"""FastAPI dependency injection definitions."""

from src.apex.api.dependencies.auth import (
    AdminUser,
    AuditReader,
    CurrentUser,
    NoteAuthor,
    ProjectDeleter,
    ProjectEditor,
    RoomEditor,
    TaskDeleter,
    TaskEditor,
    TimeLogger,
    get_current_user,
    require_permission,
)
from src.apex.api.dependencies.db import DBSession, get_db_session
from src.apex.api.dependencies.repositories import (
    ProjectRepo,
    ResetTokenRepo,
    RoomCheckRepo,
    RoomRepo,
    UserRepo,
)
from src.apex.api.dependencies.services import (
    AuditServiceDep,
    AuthServiceDep,
    ProjectServiceDep,
    RoomServiceDep,
    TaskServiceDep,
    UserServiceDep,
    get_audit_service,
    get_auth_service,
    get_project_service,
    get_room_service,
    get_task_service,
    get_user_service,
)

__all__ = [
    # Auth
    "AdminUser",
    "AuditReader",
    "CurrentUser",
    "NoteAuthor",
    "ProjectDeleter",
    "ProjectEditor",
    "RoomEditor",
    "TaskDeleter",
    "TaskEditor",
    "TimeLogger",
    "get_current_user",
    "require_permission",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "ProjectRepo",
    "ResetTokenRepo",
    "RoomCheckRepo",
    "RoomRepo",
    "UserRepo",
    # Services
    "AuditServiceDep",
    "AuthServiceDep",
    "ProjectServiceDep",
    "RoomServiceDep",
    "TaskServiceDep",
    "UserServiceDep",
    "get_audit_service",
    "get_auth_service",
    "get_project_service",
    "get_room_service",
    "get_task_service",
    "get_user_service",
]
