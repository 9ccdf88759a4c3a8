from pydantic import BaseModel


class RoleRead(BaseModel):
    name: str
    display_name: str
    permissions: list[str]


class PermissionRead(BaseModel):
    key: str
    name: str


class PermissionCategoryRead(BaseModel):
    name: str
    permissions: list[PermissionRead]
