"""Authentication service - login, registration and password resets."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.apex.core.config import get_settings
from src.apex.core.exceptions import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    PasswordChangeRequiredError,
    TooManyRequestsError,
    ValidationFailedError,
)
from src.apex.core.logging import get_logger
from src.apex.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    generate_reset_token,
    hash_password,
    hash_token,
    password_policy_violations,
    verify_password,
)
from src.apex.models import PasswordResetToken, User, UserRole
from src.apex.models.base import utc_now
from src.apex.repositories import PasswordResetTokenRepository, UserRepository

logger = get_logger(__name__)


def ensure_password_policy(password: str) -> None:
    violations = password_policy_violations(password)
    if violations:
        raise ValidationFailedError(violations)


def set_password(
    user: User, password: str, max_age_days: int, force_change: bool = False
) -> datetime:
    """Store a new password hash and restart the expiry clock. Returns the expiry."""
    now = utc_now()
    expires_at = now + timedelta(days=max_age_days)
    user.hashed_password = hash_password(password)
    user.password_changed_at = now
    user.password_expires_at = expires_at
    user.force_password_change = force_change
    user.updated_at = now
    return expires_at


@dataclass(frozen=True)
class IssuedResetToken:
    user: User
    token: str


class AuthService:
    def __init__(
        self,
        user_repo: UserRepository,
        reset_token_repo: PasswordResetTokenRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.reset_token_repo = reset_token_repo
        self.session = session

    async def authenticate(self, email: str, password: str) -> tuple[str, User]:
        """Check credentials and issue an access token.

        Raises:
            AuthenticationError: Unknown email, wrong password or inactive user.
            PasswordChangeRequiredError: Password expired or a change is forced.
        """
        user = await self.user_repo.get_by_email(email)

        # Always verify so response timing does not reveal which emails exist
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        if user.force_password_change:
            raise PasswordChangeRequiredError(
                "Password change required", reason="force_password_change"
            )
        if user.password_expires_at is not None and user.password_expires_at <= utc_now():
            raise PasswordChangeRequiredError("Password has expired", reason="password_expired")

        try:
            user.last_login_at = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        token = create_access_token(user.id, user.email, user.role)
        logger.info("User logged in", user_id=str(user.id), role=user.role)
        return token, user

    async def register(self, email: str, password: str, name: str) -> User:
        """Create a self-registered account with the auditor role."""
        ensure_password_policy(password)
        if await self.user_repo.exists_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(email=email.lower(), name=name.strip(), role=UserRole.AUDITOR.value)
        set_password(user, password, get_settings().password_max_age_days)
        self.user_repo.add(user)

        try:
            await self.session.commit()
            await self.session.refresh(user)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User registered", user_id=str(user.id))
        return user

    async def request_password_reset(self, email: str) -> IssuedResetToken | None:
        """Issue a reset token for an active account.

        Returns None for unknown or inactive emails; the caller answers the
        same way in both cases.

        Raises:
            TooManyRequestsError: Too many tokens issued in the last hour.
        """
        settings = get_settings()
        user = await self.user_repo.get_by_email(email)
        if user is None or not user.is_active:
            logger.info("Password reset requested for unknown or inactive account")
            return None

        now = utc_now()
        recent = await self.reset_token_repo.count_recent(user.id, now - timedelta(hours=1))
        if recent >= settings.password_reset_max_requests_per_hour:
            logger.warning("Password reset rate limit reached", user_id=str(user.id))
            raise TooManyRequestsError("Too many password reset requests, try again later")

        token = generate_reset_token()
        self.reset_token_repo.add(
            PasswordResetToken(
                user_id=user.id,
                token_hash=hash_token(token),
                expires_at=now + timedelta(minutes=settings.password_reset_expire_minutes),
            )
        )

        try:
            await self.reset_token_repo.delete_for_user(user.id, stale_only=True)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Password reset token issued", user_id=str(user.id))
        return IssuedResetToken(user=user, token=token)

    async def reset_password(self, email: str, token: str, new_password: str) -> User:
        """Consume a reset token and set the new password."""
        invalid = BadRequestError("Invalid or expired reset token")
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise invalid
        reset_token = await self.reset_token_repo.get_valid(user.id, hash_token(token))
        if reset_token is None:
            raise invalid

        ensure_password_policy(new_password)
        set_password(user, new_password, get_settings().password_max_age_days)

        try:
            await self.reset_token_repo.delete_for_user(user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Password reset completed", user_id=str(user.id))
        return user
