from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.apex.models import UserRole

AVATAR_MAX_LENGTH = 2_000_000


class UserRead(BaseModel):
    id: UUID
    email: EmailStr
    name: str
    role: str
    is_active: bool
    avatar: str | None
    preferences: dict[str, Any]
    password_expires_at: datetime | None
    force_password_change: bool
    last_login_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Admin-created account; the password policy still applies."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.AUDITOR


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    role: UserRole | None = None
    is_active: bool | None = None


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=1, max_length=128)


class TemporaryPasswordResponse(BaseModel):
    message: str
    temporary_password: str
    password_expires_at: datetime


class PreferencesUpdate(BaseModel):
    preferences: dict[str, Any]


class AvatarUpdate(BaseModel):
    avatar: str = Field(min_length=1, max_length=AVATAR_MAX_LENGTH)

    @field_validator("avatar")
    @classmethod
    def validate_avatar(cls, v: str) -> str:
        if not v.startswith("data:image/"):
            raise ValueError("Avatar must be an image data URL (data:image/...)")
        return v
