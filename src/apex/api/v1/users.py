"""User management endpoints."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.apex.api.dependencies import (
    AdminUser,
    AuditServiceDep,
    CurrentUser,
    UserServiceDep,
)
from src.apex.models import AuditAction, AuditCategory
from src.apex.schemas.auth import MessageResponse
from src.apex.schemas.pagination import PaginatedResponse
from src.apex.schemas.user import (
    AvatarUpdate,
    PasswordChangeRequest,
    PreferencesUpdate,
    TemporaryPasswordResponse,
    UserCreate,
    UserRead,
    UserUpdate,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=PaginatedResponse[UserRead])
async def list_users(
    admin: AdminUser,
    service: UserServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[UserRead]:
    users, next_cursor, has_more = await service.list_users(cursor, limit)
    return PaginatedResponse(
        items=[UserRead.model_validate(u) for u in users],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)


@router.put(
    "/me/password",
    response_model=MessageResponse,
    responses={400: {"description": "Current password incorrect"}},
)
async def change_my_password(
    data: PasswordChangeRequest,
    current_user: CurrentUser,
    service: UserServiceDep,
    audit: AuditServiceDep,
) -> MessageResponse:
    await service.change_password(current_user, data.current_password, data.new_password)
    await audit.log_success(AuditAction.PASSWORD_CHANGE, AuditCategory.SECURITY, actor=current_user)
    return MessageResponse(message="Password changed successfully")


@router.get("/me/preferences")
async def get_my_preferences(current_user: CurrentUser) -> dict[str, Any]:
    return current_user.preferences or {}


@router.put("/me/preferences")
async def update_my_preferences(
    data: PreferencesUpdate,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> dict[str, Any]:
    user = await service.update_preferences(current_user, data.preferences)
    return user.preferences


@router.put("/me/avatar", response_model=UserRead)
async def update_my_avatar(
    data: AvatarUpdate,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> UserRead:
    user = await service.set_avatar(current_user, data.avatar)
    return UserRead.model_validate(user)


@router.delete("/me/avatar", response_model=UserRead)
async def delete_my_avatar(current_user: CurrentUser, service: UserServiceDep) -> UserRead:
    user = await service.set_avatar(current_user, None)
    return UserRead.model_validate(user)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
async def create_user(
    data: UserCreate,
    admin: AdminUser,
    service: UserServiceDep,
    audit: AuditServiceDep,
) -> UserRead:
    """Create an account; the new user must change the password on first login."""
    user = await service.create_user(data)
    await audit.log_success(
        AuditAction.USER_CREATE,
        AuditCategory.ADMIN,
        actor=admin,
        resource="user",
        details={"user_id": str(user.id), "email": user.email, "role": user.role},
    )
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    admin: AdminUser,
    service: UserServiceDep,
    audit: AuditServiceDep,
) -> UserRead:
    user, changed = await service.update_user(user_id, data)
    if changed:
        await audit.log_success(
            AuditAction.USER_UPDATE,
            AuditCategory.ADMIN,
            actor=admin,
            resource="user",
            details={"user_id": str(user.id), "fields": sorted(changed)},
        )
    return UserRead.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    admin: AdminUser,
    service: UserServiceDep,
    audit: AuditServiceDep,
) -> None:
    user = await service.delete_user(user_id, acting_user_id=admin.id)
    await audit.log_success(
        AuditAction.USER_DELETE,
        AuditCategory.ADMIN,
        actor=admin,
        resource="user",
        details={"user_id": str(user_id), "email": user.email},
    )


@router.post("/{user_id}/reset-password", response_model=TemporaryPasswordResponse)
async def reset_user_password(
    user_id: UUID,
    admin: AdminUser,
    service: UserServiceDep,
    audit: AuditServiceDep,
) -> TemporaryPasswordResponse:
    """Issue a temporary password. It is shown once and must be changed at next login."""
    user, temporary, expires_at = await service.issue_temporary_password(user_id)
    await audit.log_success(
        AuditAction.USER_PASSWORD_ADMIN_RESET,
        AuditCategory.SECURITY,
        actor=admin,
        resource="user",
        details={"user_id": str(user.id)},
    )
    return TemporaryPasswordResponse(
        message="Temporary password issued",
        temporary_password=temporary,
        password_expires_at=expires_at,
    )
