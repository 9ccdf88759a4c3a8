from src.apex.schemas.audit import AuditLogAccepted, AuditLogCreate, AuditLogRead
from src.apex.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
)
from src.apex.schemas.pagination import OffsetPage, PaginatedResponse
from src.apex.schemas.project import (
    ProjectCreate,
    ProjectHealthRead,
    ProjectRead,
    ProjectStatsRead,
    ProjectUpdate,
)
from src.apex.schemas.role import PermissionCategoryRead, RoleRead
from src.apex.schemas.room import RoomCheckCreate, RoomCheckRead, RoomRead, RoomUpsert
from src.apex.schemas.task import (
    TaskCreate,
    TaskNoteCreate,
    TaskUpdate,
    TimeEntryCreate,
    TimeEntryResult,
)
from src.apex.schemas.user import (
    AvatarUpdate,
    PasswordChangeRequest,
    PreferencesUpdate,
    TemporaryPasswordResponse,
    UserCreate,
    UserRead,
    UserUpdate,
)

__all__ = [
    # Audit
    "AuditLogAccepted",
    "AuditLogCreate",
    "AuditLogRead",
    # Auth
    "ForgotPasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RegisterRequest",
    "ResetPasswordRequest",
    # Pagination
    "OffsetPage",
    "PaginatedResponse",
    # Project
    "ProjectCreate",
    "ProjectHealthRead",
    "ProjectRead",
    "ProjectStatsRead",
    "ProjectUpdate",
    # Roles
    "PermissionCategoryRead",
    "RoleRead",
    # Rooms
    "RoomCheckCreate",
    "RoomCheckRead",
    "RoomRead",
    "RoomUpsert",
    # Tasks
    "TaskCreate",
    "TaskNoteCreate",
    "TaskUpdate",
    "TimeEntryCreate",
    "TimeEntryResult",
    # User
    "AvatarUpdate",
    "PasswordChangeRequest",
    "PreferencesUpdate",
    "TemporaryPasswordResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
