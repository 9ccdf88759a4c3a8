"""Repositories for users and password reset tokens."""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import delete, func, or_
from sqlalchemy.engine import CursorResult
from sqlmodel import select

from src.apex.models import PasswordResetToken, User
from src.apex.models.base import utc_now
from src.apex.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        user = await self.get_by_email(email)
        return user is not None

    async def list_all(
        self,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[User], str | None, bool]:
        return await self.paginate(select(User), cursor, limit, User.created_at)


class PasswordResetTokenRepository(BaseRepository[PasswordResetToken]):
    model = PasswordResetToken

    async def count_recent(self, user_id: UUID, since: datetime) -> int:
        """Tokens issued to a user since the given time."""
        result = await self.session.execute(
            select(func.count())
            .select_from(PasswordResetToken)
            .where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.created_at >= since,
            )
        )
        return int(result.scalar_one())

    async def get_valid(self, user_id: UUID, token_hash: str) -> PasswordResetToken | None:
        """Unused, unexpired token for this user."""
        result = await self.session.execute(
            select(PasswordResetToken).where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.token_hash == token_hash,
                PasswordResetToken.used_at == None,  # noqa: E711
                PasswordResetToken.expires_at > utc_now(),
            )
        )
        return result.scalar_one_or_none()

    async def delete_for_user(self, user_id: UUID, *, stale_only: bool = False) -> int:
        """Remove a user's tokens; with stale_only just the used or expired ones."""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
        if stale_only:
            stmt = stmt.where(
                or_(
                    PasswordResetToken.used_at != None,  # noqa: E711
                    PasswordResetToken.expires_at <= utc_now(),
                )
            )
        result = await self.session.execute(stmt)
        return cast(CursorResult[Any], result).rowcount
