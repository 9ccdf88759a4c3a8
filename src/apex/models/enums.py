"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Role assigned to a user; permissions are derived from it."""

    OWNER = "owner"
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    FIELD_OPS = "field_ops"
    AUDITOR = "auditor"
    VIEWER = "viewer"


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    PLANNING = "planning"
    ACTIVE = "active"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    SCHEDULED = "scheduled"


class RagStatus(str, Enum):
    """Red/amber/green room condition."""

    GREEN = "green"
    AMBER = "amber"
    RED = "red"


class AuditCategory(str, Enum):
    GENERAL = "general"
    AUTH = "auth"
    USER = "user"
    PROJECT = "project"
    ADMIN = "admin"
    SECURITY = "security"
    SYSTEM = "system"


class AuditSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
