"""Static role catalog and permission checks."""

from enum import Enum
from typing import Any

from src.apex.models.enums import UserRole

WILDCARD = "*"


class Permission(str, Enum):
    PROJECTS_VIEW = "projects.view"
    PROJECTS_EDIT = "projects.edit"
    PROJECTS_DELETE = "projects.delete"
    TASKS_VIEW = "tasks.view"
    TASKS_EDIT = "tasks.edit"
    TASKS_DELETE = "tasks.delete"
    TASKS_UPDATE_ASSIGNED = "tasks.update.assigned"
    TASK_NOTES_VIEW = "tasks.notes.view"
    TASK_NOTES_ADD = "tasks.notes.add"
    TIME_ENTRY = "fieldops.timeentry"
    TEAM_MANAGE = "team.manage"
    USERS_MANAGE = "users.manage"
    REPORTS_READ = "reports.read"
    AUDIT_READ = "audit.read"
    ROOMS_EDIT = "rooms.edit"


ROLE_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": UserRole.SUPERADMIN.value,
        "display_name": "Super Administrator",
        "permissions": [WILDCARD],
    },
    {"name": UserRole.ADMIN.value, "display_name": "Administrator", "permissions": [WILDCARD]},
    {"name": UserRole.OWNER.value, "display_name": "Owner", "permissions": [WILDCARD]},
    {
        "name": UserRole.PROJECT_MANAGER.value,
        "display_name": "Project Manager",
        "permissions": [
            Permission.PROJECTS_VIEW.value,
            Permission.PROJECTS_EDIT.value,
            Permission.TASKS_VIEW.value,
            Permission.TASKS_EDIT.value,
            Permission.TASK_NOTES_ADD.value,
            Permission.TEAM_MANAGE.value,
            Permission.ROOMS_EDIT.value,
        ],
    },
    {
        "name": UserRole.FIELD_OPS.value,
        "display_name": "Field Operations",
        "permissions": [
            Permission.TASKS_UPDATE_ASSIGNED.value,
            Permission.TASK_NOTES_VIEW.value,
            Permission.TASK_NOTES_ADD.value,
            Permission.TIME_ENTRY.value,
            Permission.ROOMS_EDIT.value,
        ],
    },
    {
        "name": UserRole.AUDITOR.value,
        "display_name": "Auditor",
        "permissions": [
            Permission.PROJECTS_VIEW.value,
            Permission.TASKS_VIEW.value,
            Permission.REPORTS_READ.value,
            Permission.AUDIT_READ.value,
        ],
    },
    {
        "name": UserRole.VIEWER.value,
        "display_name": "Viewer",
        "permissions": [Permission.PROJECTS_VIEW.value],
    },
]

PERMISSION_CATALOG: list[dict[str, Any]] = [
    {
        "name": "Projects",
        "permissions": [
            {"key": Permission.PROJECTS_VIEW.value, "name": "View Projects"},
            {"key": Permission.PROJECTS_EDIT.value, "name": "Edit Projects"},
            {"key": Permission.PROJECTS_DELETE.value, "name": "Delete Projects"},
        ],
    },
    {
        "name": "Tasks",
        "permissions": [
            {"key": Permission.TASKS_VIEW.value, "name": "View Tasks"},
            {"key": Permission.TASKS_EDIT.value, "name": "Edit Tasks"},
            {"key": Permission.TASKS_DELETE.value, "name": "Delete Tasks"},
            {"key": Permission.TASKS_UPDATE_ASSIGNED.value, "name": "Update Assigned Tasks"},
            {"key": Permission.TASK_NOTES_ADD.value, "name": "Add Task Notes"},
            {"key": Permission.TIME_ENTRY.value, "name": "Log Time"},
        ],
    },
    {
        "name": "Administration",
        "permissions": [
            {"key": Permission.USERS_MANAGE.value, "name": "Manage Users"},
            {"key": Permission.AUDIT_READ.value, "name": "Read Audit Log"},
            {"key": Permission.ROOMS_EDIT.value, "name": "Edit Room Status"},
        ],
    },
]

_ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    role["name"]: frozenset(role["permissions"]) for role in ROLE_DEFINITIONS
}


def permissions_for(role: str) -> frozenset[str]:
    """Permissions granted to a role; unknown roles get none."""
    return _ROLE_PERMISSIONS.get(role, frozenset())


def has_permission(role: str, *required: Permission | str) -> bool:
    """True when the role holds any of the required permissions."""
    granted = permissions_for(role)
    if WILDCARD in granted:
        return True
    return any(
        (perm.value if isinstance(perm, Permission) else perm) in granted for perm in required
    )
