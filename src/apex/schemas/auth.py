from pydantic import BaseModel, EmailStr, Field

from src.apex.schemas.user import UserRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead


class RegisterRequest(BaseModel):
    """Self-service registration; new accounts get the auditor role."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=100)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    token: str = Field(min_length=64, max_length=64)
    new_password: str = Field(min_length=1, max_length=128)


class MessageResponse(BaseModel):
    message: str
