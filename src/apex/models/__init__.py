"""Model exports.

Import from here: `from src.apex.models import Project, User`
"""

from src.apex.models.audit import AuditAction, AuditLog
from src.apex.models.enums import (
    AuditCategory,
    AuditSeverity,
    ProjectStatus,
    RagStatus,
    UserRole,
)
from src.apex.models.project import Project
from src.apex.models.room import ROOM_CHECK_COUNT, Room, RoomCheck
from src.apex.models.user import PasswordResetToken, User

__all__ = [
    # Enums
    "AuditAction",
    "AuditCategory",
    "AuditSeverity",
    "ProjectStatus",
    "RagStatus",
    "UserRole",
    # Tables
    "AuditLog",
    "PasswordResetToken",
    "Project",
    "ROOM_CHECK_COUNT",
    "Room",
    "RoomCheck",
    "User",
]
