"""Service layer - business logic and transaction control."""

from src.apex.services.audit_service import AuditService
from src.apex.services.auth_service import AuthService
from src.apex.services.project_service import ProjectService
from src.apex.services.rollup import RollupService, compute_rollup
from src.apex.services.room_service import RoomService
from src.apex.services.task_service import TaskService
from src.apex.services.user_service import UserService

__all__ = [
    "AuditService",
    "AuthService",
    "ProjectService",
    "RollupService",
    "RoomService",
    "TaskService",
    "UserService",
    "compute_rollup",
]
