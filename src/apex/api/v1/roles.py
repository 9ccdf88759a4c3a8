"""Role and permission catalog endpoints."""

from fastapi import APIRouter

from src.apex.api.dependencies import CurrentUser
from src.apex.core.security import PERMISSION_CATALOG, ROLE_DEFINITIONS
from src.apex.schemas.role import PermissionCategoryRead, RoleRead

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("", response_model=list[RoleRead])
async def list_roles(current_user: CurrentUser) -> list[RoleRead]:
    return [RoleRead.model_validate(role) for role in ROLE_DEFINITIONS]


@router.get("/permissions", response_model=list[PermissionCategoryRead])
async def list_permissions(current_user: CurrentUser) -> list[PermissionCategoryRead]:
    """All assignable permissions grouped by area."""
    return [PermissionCategoryRead.model_validate(category) for category in PERMISSION_CATALOG]
