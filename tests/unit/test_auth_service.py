"""Unit tests for AuthService login, registration and password resets."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.apex.core.exceptions import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    PasswordChangeRequiredError,
    TooManyRequestsError,
    ValidationFailedError,
)
from src.apex.core.security import decode_token, hash_token, verify_password
from src.apex.models.base import utc_now
from src.apex.services.auth_service import AuthService
from tests.factories import UserFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD

pytestmark = pytest.mark.unit


@pytest.fixture
def user_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_email = AsyncMock(return_value=None)
    repo.exists_by_email = AsyncMock(return_value=False)
    return repo


@pytest.fixture
def token_repo() -> MagicMock:
    repo = MagicMock()
    repo.count_recent = AsyncMock(return_value=0)
    repo.get_valid = AsyncMock(return_value=None)
    repo.delete_for_user = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def service(user_repo, token_repo, mock_session) -> AuthService:
    return AuthService(user_repo, token_repo, mock_session)


class TestAuthenticate:
    async def test_issues_token(self, service, user_repo, mock_session):
        user = UserFactory.project_manager()
        user_repo.get_by_email.return_value = user

        token, returned = await service.authenticate(user.email, DEFAULT_TEST_PASSWORD)

        payload = decode_token(token)
        assert payload["sub"] == str(user.id)
        assert payload["role"] == "project_manager"
        assert returned.last_login_at is not None
        mock_session.commit.assert_awaited_once()

    async def test_wrong_password(self, service, user_repo):
        user_repo.get_by_email.return_value = UserFactory.build()

        with pytest.raises(AuthenticationError):
            await service.authenticate("someone@example.com", "Wr0ng!Password#")

    async def test_unknown_email(self, service):
        with pytest.raises(AuthenticationError):
            await service.authenticate("nobody@example.com", DEFAULT_TEST_PASSWORD)

    async def test_inactive_user(self, service, user_repo):
        user_repo.get_by_email.return_value = UserFactory.inactive()

        with pytest.raises(AuthenticationError):
            await service.authenticate("someone@example.com", DEFAULT_TEST_PASSWORD)

    async def test_forced_change(self, service, user_repo, mock_session):
        user_repo.get_by_email.return_value = UserFactory.build(force_password_change=True)

        with pytest.raises(PasswordChangeRequiredError) as exc_info:
            await service.authenticate("someone@example.com", DEFAULT_TEST_PASSWORD)

        assert exc_info.value.reason == "force_password_change"
        mock_session.commit.assert_not_awaited()

    async def test_expired_password(self, service, user_repo):
        user_repo.get_by_email.return_value = UserFactory.build(
            password_expires_at=utc_now() - timedelta(minutes=1)
        )

        with pytest.raises(PasswordChangeRequiredError) as exc_info:
            await service.authenticate("someone@example.com", DEFAULT_TEST_PASSWORD)

        assert exc_info.value.reason == "password_expired"


class TestRegister:
    async def test_creates_auditor(self, service, user_repo, mock_session):
        user = await service.register("New.User@Example.com", DEFAULT_TEST_PASSWORD, " New ")

        assert user.email == "new.user@example.com"
        assert user.name == "New"
        assert user.role == "auditor"
        assert user.force_password_change is False
        assert user.password_expires_at > utc_now()
        assert verify_password(DEFAULT_TEST_PASSWORD, user.hashed_password)
        user_repo.add.assert_called_once_with(user)
        mock_session.commit.assert_awaited_once()

    async def test_weak_password(self, service, user_repo):
        with pytest.raises(ValidationFailedError):
            await service.register("new@example.com", "short", "New")

        user_repo.add.assert_not_called()

    async def test_duplicate_email(self, service, user_repo):
        user_repo.exists_by_email.return_value = True

        with pytest.raises(ConflictError):
            await service.register("new@example.com", DEFAULT_TEST_PASSWORD, "New")


class TestPasswordReset:
    async def test_unknown_email_returns_none(self, service, token_repo):
        assert await service.request_password_reset("nobody@example.com") is None
        token_repo.add.assert_not_called()

    async def test_issues_hashed_token(self, service, user_repo, token_repo, mock_session):
        user = UserFactory.build()
        user_repo.get_by_email.return_value = user

        issued = await service.request_password_reset(user.email)

        stored = token_repo.add.call_args[0][0]
        assert issued.user is user
        assert stored.user_id == user.id
        assert stored.token_hash == hash_token(issued.token)
        assert stored.token_hash != issued.token
        token_repo.delete_for_user.assert_awaited_once_with(user.id, stale_only=True)
        mock_session.commit.assert_awaited_once()

    async def test_rate_limited(self, service, user_repo, token_repo):
        user_repo.get_by_email.return_value = UserFactory.build()
        token_repo.count_recent.return_value = 100

        with pytest.raises(TooManyRequestsError):
            await service.request_password_reset("someone@example.com")

    async def test_reset_with_valid_token(self, service, user_repo, token_repo):
        user = UserFactory.build(force_password_change=True)
        user_repo.get_by_email.return_value = user
        token_repo.get_valid.return_value = MagicMock()

        await service.reset_password(user.email, "token", "N3w!Passphrase#9")

        assert verify_password("N3w!Passphrase#9", user.hashed_password)
        assert user.force_password_change is False
        token_repo.get_valid.assert_awaited_once_with(user.id, hash_token("token"))
        token_repo.delete_for_user.assert_awaited_once_with(user.id)

    async def test_reset_with_invalid_token(self, service, user_repo):
        user_repo.get_by_email.return_value = UserFactory.build()

        with pytest.raises(BadRequestError):
            await service.reset_password("someone@example.com", "bogus", "N3w!Passphrase#9")
