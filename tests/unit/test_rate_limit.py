"""Tests for the authentication rate limiter."""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request

from src.apex.core.rate_limit import (
    auth_rate_limit,
    create_limiter,
    get_rate_limit_key,
    limiter,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_request() -> MagicMock:
    request = MagicMock(spec=Request)
    request.headers = {"x-forwarded-for": "198.51.100.1"}
    request.client = MagicMock()
    request.client.host = "192.168.1.100"
    return request


def test_key_is_client_ip(mock_request):
    with patch("src.apex.core.rate_limit.get_remote_address", return_value="192.168.1.100"):
        assert get_rate_limit_key(mock_request) == "192.168.1.100"


def test_key_never_uses_forwarded_header(mock_request):
    """A client rotating X-Forwarded-For must not get a fresh bucket."""
    with patch("src.apex.core.rate_limit.get_remote_address", return_value="192.168.1.100"):
        assert get_rate_limit_key(mock_request) != "198.51.100.1"


def test_unknown_client_gets_shared_key(mock_request):
    with patch("src.apex.core.rate_limit.get_remote_address", return_value=None):
        assert get_rate_limit_key(mock_request) == "unknown"


def test_limiter_disabled_in_testing():
    assert limiter.enabled is False


def test_limiter_enabled_outside_testing():
    settings = MagicMock()
    settings.app_env = "production"
    settings.rate_limit_storage_uri = None

    with patch("src.apex.core.rate_limit.get_settings", return_value=settings):
        assert create_limiter().enabled is True


def test_auth_limit_comes_from_settings():
    assert auth_rate_limit() == "15 per 15 minutes"
