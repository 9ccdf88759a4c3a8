"""User service - account administration and self-service profile changes."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.apex.core.config import get_settings
from src.apex.core.exceptions import BadRequestError, ConflictError, NotFoundError
from src.apex.core.logging import get_logger
from src.apex.core.security import generate_temporary_password, verify_password
from src.apex.models import User
from src.apex.models.base import utc_now
from src.apex.repositories import UserRepository
from src.apex.schemas.user import UserCreate, UserUpdate
from src.apex.services.auth_service import ensure_password_policy, set_password

logger = get_logger(__name__)


class UserService:
    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def _commit(self, user: User | None = None) -> None:
        try:
            await self.session.commit()
            if user is not None:
                await self.session.refresh(user)
        except Exception:
            await self.session.rollback()
            raise

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[User], str | None, bool]:
        return await self.user_repo.list_all(cursor=cursor, limit=limit)

    async def create_user(self, data: UserCreate) -> User:
        """Admin-created account; the user must pick a new password on first login."""
        ensure_password_policy(data.password)
        if await self.user_repo.exists_by_email(data.email):
            raise ConflictError("User with this email already exists")

        user = User(email=data.email.lower(), name=data.name.strip(), role=data.role.value)
        set_password(user, data.password, get_settings().password_max_age_days, force_change=True)
        self.user_repo.add(user)
        await self._commit(user)
        logger.info("User created", user_id=str(user.id), role=user.role)
        return user

    async def update_user(self, user_id: UUID, data: UserUpdate) -> tuple[User, dict[str, Any]]:
        """Apply an admin update. Returns the user and the changed fields."""
        user = await self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            if changes["email"] != user.email:
                existing = await self.user_repo.get_by_email(changes["email"])
                if existing is not None and existing.id != user.id:
                    raise ConflictError("User with this email already exists")
        if "role" in changes:
            changes["role"] = data.role.value if data.role else user.role

        changed = {key: value for key, value in changes.items() if getattr(user, key) != value}
        for key, value in changed.items():
            setattr(user, key, value)
        if changed:
            user.updated_at = utc_now()
            await self._commit(user)
            logger.info("User updated", user_id=str(user.id), fields=sorted(changed))
        return user, changed

    async def delete_user(self, user_id: UUID, acting_user_id: UUID) -> User:
        if user_id == acting_user_id:
            raise ConflictError("You cannot delete your own account")
        user = await self.get_user(user_id)
        await self.user_repo.delete(user)
        await self._commit()
        logger.info("User deleted", user_id=str(user_id))
        return user

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise BadRequestError("Current password is incorrect")
        if current_password == new_password:
            raise BadRequestError("New password must differ from the current password")
        ensure_password_policy(new_password)

        set_password(user, new_password, get_settings().password_max_age_days)
        await self._commit(user)
        logger.info("Password changed", user_id=str(user.id))

    async def issue_temporary_password(self, user_id: UUID) -> tuple[User, str, datetime]:
        """Replace a user's password with a random one that must be changed."""
        user = await self.get_user(user_id)
        temporary = generate_temporary_password()
        expires_at = set_password(
            user,
            temporary,
            get_settings().temporary_password_max_age_days,
            force_change=True,
        )
        await self._commit(user)
        logger.info("Temporary password issued", user_id=str(user.id))
        return user, temporary, expires_at

    async def update_preferences(self, user: User, preferences: dict[str, Any]) -> User:
        user.preferences = dict(preferences)
        user.updated_at = utc_now()
        await self._commit(user)
        return user

    async def set_avatar(self, user: User, avatar: str | None) -> User:
        user.avatar = avatar
        user.updated_at = utc_now()
        await self._commit(user)
        return user
