"""Unit tests for UserService administration and self-service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.apex.core.exceptions import BadRequestError, ConflictError, NotFoundError
from src.apex.core.security import password_policy_violations, verify_password
from src.apex.models import UserRole
from src.apex.schemas.user import UserCreate, UserUpdate
from src.apex.services.user_service import UserService
from tests.factories import UserFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD

pytestmark = pytest.mark.unit


@pytest.fixture
def user_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.exists_by_email = AsyncMock(return_value=False)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def service(user_repo, mock_session) -> UserService:
    return UserService(user_repo, mock_session)


async def test_create_user_forces_password_change(service, user_repo):
    user = await service.create_user(
        UserCreate(
            email="Field.Tech@Example.com",
            password=DEFAULT_TEST_PASSWORD,
            name="Field Tech",
            role=UserRole.FIELD_OPS,
        )
    )

    assert user.email == "field.tech@example.com"
    assert user.role == "field_ops"
    assert user.force_password_change is True
    user_repo.add.assert_called_once_with(user)


async def test_get_missing_user(service):
    with pytest.raises(NotFoundError):
        await service.get_user(UserFactory.build().id)


class TestUpdateUser:
    async def test_reports_changed_fields(self, service, user_repo, mock_session):
        user = UserFactory.build(name="Old Name")
        user_repo.get_by_id.return_value = user

        updated, changed = await service.update_user(
            user.id, UserUpdate(name="New Name", role=UserRole.VIEWER, is_active=True)
        )

        assert changed == {"name": "New Name", "role": "viewer"}
        assert updated.role == "viewer"
        mock_session.commit.assert_awaited_once()

    async def test_no_changes_skips_commit(self, service, user_repo, mock_session):
        user = UserFactory.build(name="Same")
        user_repo.get_by_id.return_value = user

        _, changed = await service.update_user(user.id, UserUpdate(name="Same"))

        assert changed == {}
        mock_session.commit.assert_not_awaited()

    async def test_email_taken(self, service, user_repo):
        user = UserFactory.build()
        user_repo.get_by_id.return_value = user
        user_repo.get_by_email.return_value = UserFactory.build()

        with pytest.raises(ConflictError):
            await service.update_user(user.id, UserUpdate(email="taken@example.com"))


async def test_cannot_delete_self(service):
    admin = UserFactory.admin()

    with pytest.raises(ConflictError):
        await service.delete_user(admin.id, admin.id)


async def test_delete_user(service, user_repo, mock_session):
    user = UserFactory.build()
    user_repo.get_by_id.return_value = user

    await service.delete_user(user.id, UserFactory.admin().id)

    user_repo.delete.assert_awaited_once_with(user)
    mock_session.commit.assert_awaited_once()


class TestChangePassword:
    async def test_changes_password(self, service):
        user = UserFactory.build(force_password_change=True)

        await service.change_password(user, DEFAULT_TEST_PASSWORD, "N3w!Passphrase#9")

        assert verify_password("N3w!Passphrase#9", user.hashed_password)
        assert user.force_password_change is False

    async def test_wrong_current_password(self, service):
        with pytest.raises(BadRequestError):
            await service.change_password(
                UserFactory.build(), "Wr0ng!Password#", "N3w!Passphrase#9"
            )

    async def test_same_password_rejected(self, service):
        with pytest.raises(BadRequestError):
            await service.change_password(
                UserFactory.build(), DEFAULT_TEST_PASSWORD, DEFAULT_TEST_PASSWORD
            )


async def test_temporary_password(service, user_repo):
    user = UserFactory.build()
    user_repo.get_by_id.return_value = user

    _, temporary, expires_at = await service.issue_temporary_password(user.id)

    assert password_policy_violations(temporary) == []
    assert verify_password(temporary, user.hashed_password)
    assert user.force_password_change is True
    assert user.password_expires_at == expires_at


async def test_preferences_and_avatar(service):
    user = UserFactory.build()

    await service.update_preferences(user, {"theme": "dark"})
    await service.set_avatar(user, "data:image/png;base64,AAAA")

    assert user.preferences == {"theme": "dark"}
    assert user.avatar == "data:image/png;base64,AAAA"
