"""Repository layer - data access abstraction."""

from src.apex.repositories.audit import AuditLogRepository
from src.apex.repositories.base import BaseRepository
from src.apex.repositories.project import ProjectRepository
from src.apex.repositories.room import RoomCheckRepository, RoomRepository
from src.apex.repositories.user import PasswordResetTokenRepository, UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "PasswordResetTokenRepository",
    "ProjectRepository",
    "RoomCheckRepository",
    "RoomRepository",
    "UserRepository",
]
