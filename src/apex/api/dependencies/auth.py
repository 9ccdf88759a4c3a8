"""Authentication and authorization dependencies."""

from collections.abc import Awaitable, Callable
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Query, status

from src.apex.api.dependencies.repositories import UserRepo
from src.apex.core.logging import bind_user_context
from src.apex.core.security import (
    ACCESS_TOKEN_TYPE,
    Permission,
    decode_token,
    has_permission,
)
from src.apex.models import User


def _extract_token(
    authorization: str | None, x_auth_token: str | None, token: str | None
) -> str | None:
    """Bearer header first, then X-Auth-Token, then the ?token= query parameter."""
    if authorization:
        if not authorization.startswith("Bearer "):
            return None
        return authorization[7:]
    return x_auth_token or token


async def get_current_user(
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
    x_auth_token: Annotated[str | None, Header()] = None,
    token: Annotated[str | None, Query(include_in_schema=False)] = None,
) -> User:
    """Validate the access token and return the active user it names."""
    raw_token = _extract_token(authorization, x_auth_token, token)
    if not raw_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    payload = decode_token(raw_token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    try:
        user_id = UUID(str(payload.get("sub", "")))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        ) from e

    user = await user_repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    bind_user_context(user.id, user.role, user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_permission(*permissions: Permission) -> Callable[[User], Awaitable[User]]:
    """Dependency factory: the user's role must grant one of the permissions."""

    async def _check(user: CurrentUser) -> User:
        if not has_permission(user.role, *permissions):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _check


AdminUser = Annotated[User, Depends(require_permission(Permission.USERS_MANAGE))]
ProjectDeleter = Annotated[User, Depends(require_permission(Permission.PROJECTS_DELETE))]
ProjectEditor = Annotated[User, Depends(require_permission(Permission.PROJECTS_EDIT))]
TaskEditor = Annotated[
    User,
    Depends(require_permission(Permission.TASKS_EDIT, Permission.TASKS_UPDATE_ASSIGNED)),
]
NoteAuthor = Annotated[
    User, Depends(require_permission(Permission.TASKS_EDIT, Permission.TASK_NOTES_ADD))
]
TimeLogger = Annotated[
    User, Depends(require_permission(Permission.TASKS_EDIT, Permission.TIME_ENTRY))
]
TaskDeleter = Annotated[User, Depends(require_permission(Permission.TASKS_DELETE))]
RoomEditor = Annotated[User, Depends(require_permission(Permission.ROOMS_EDIT))]
AuditReader = Annotated[User, Depends(require_permission(Permission.AUDIT_READ))]
