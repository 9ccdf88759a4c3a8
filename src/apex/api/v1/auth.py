"""Authentication endpoints."""

from fastapi import APIRouter, BackgroundTasks, status
from starlette.requests import Request

from src.apex.api.dependencies import AuditServiceDep, AuthServiceDep, CurrentUser
from src.apex.core.config import get_settings
from src.apex.core.exceptions import AuthenticationError, PasswordChangeRequiredError
from src.apex.core.notifications import send_password_reset_email
from src.apex.core.rate_limit import auth_rate_limit, limiter
from src.apex.models import AuditAction, AuditCategory
from src.apex.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
)
from src.apex.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])

# Same answer whether or not the email exists
RESET_REQUESTED_MESSAGE = "If that email is registered, a reset link has been sent"


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Password expired or must be changed"},
        429: {"description": "Too many attempts"},
    },
)
@limiter.limit(auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthServiceDep,
    audit: AuditServiceDep,
) -> LoginResponse:
    """Authenticate with email and password and return an access token."""
    try:
        token, user = await service.authenticate(login_data.email, login_data.password)
    except (AuthenticationError, PasswordChangeRequiredError) as e:
        await audit.log_failure(
            AuditAction.USER_LOGIN,
            AuditCategory.AUTH,
            reason=str(e.detail),
            user_label=login_data.email,
        )
        raise

    await audit.log_success(AuditAction.USER_LOGIN, AuditCategory.AUTH, actor=user)
    return LoginResponse(
        access_token=token,
        expires_in=get_settings().access_token_expire_minutes * 60,
        user=UserRead.model_validate(user),
    )


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
@limiter.limit(auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthServiceDep,
    audit: AuditServiceDep,
) -> UserRead:
    user = await service.register(
        email=register_data.email,
        password=register_data.password,
        name=register_data.name,
    )
    await audit.log_success(AuditAction.USER_REGISTER, AuditCategory.AUTH, actor=user)
    return UserRead.model_validate(user)


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(auth_rate_limit)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    service: AuthServiceDep,
    audit: AuditServiceDep,
) -> MessageResponse:
    """Start a password reset; the link is emailed after the response is sent."""
    issued = await service.request_password_reset(data.email)
    if issued is not None:
        background_tasks.add_task(
            send_password_reset_email, issued.user.email, issued.token, issued.user.name
        )
        await audit.log_success(
            AuditAction.PASSWORD_RESET_REQUEST, AuditCategory.SECURITY, actor=issued.user
        )
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid or expired reset token"}},
)
@limiter.limit(auth_rate_limit)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    service: AuthServiceDep,
    audit: AuditServiceDep,
) -> MessageResponse:
    user = await service.reset_password(data.email, data.token, data.new_password)
    await audit.log_success(AuditAction.PASSWORD_RESET, AuditCategory.SECURITY, actor=user)
    return MessageResponse(message="Password has been reset")


@router.get("/me", response_model=UserRead)
async def me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)
