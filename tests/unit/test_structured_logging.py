"""Tests for structured logging context."""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.apex.core import config
from src.apex.core.logging import (
    bind_request_context,
    bind_user_context,
    clear_request_context,
    request_log_context,
    setup_logging,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Route structlog output into a CapturingLogger for the test."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def test_bind_request_context(capturing_logger):
    bind_request_context("test-request-123")
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == "test-request-123"


def test_bind_request_context_with_none(capturing_logger):
    bind_request_context(None)
    structlog.get_logger().info("test message")

    assert "request_id" not in capturing_logger.calls[0].kwargs


def test_bind_user_context_omits_email_by_default(capturing_logger):
    user_id = uuid4()

    bind_user_context(user_id, "project_manager", "pm@example.com")
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["user_id"] == str(user_id)
    assert kwargs["role"] == "project_manager"
    assert "user_email" not in kwargs


def test_bind_user_context_with_email_logging_enabled(capturing_logger, monkeypatch):
    mock_settings = MagicMock()
    mock_settings.log_user_emails = True
    monkeypatch.setattr(config, "get_settings", lambda: mock_settings)

    bind_user_context(uuid4(), "admin", "admin@example.com")
    structlog.get_logger().info("test message")

    assert capturing_logger.calls[0].kwargs["user_email"] == "admin@example.com"


def test_clear_request_context(capturing_logger):
    bind_request_context("test-request-123")
    bind_user_context(uuid4(), "viewer")

    clear_request_context()
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert "request_id" not in kwargs
    assert "user_id" not in kwargs
    assert "role" not in kwargs


def test_context_accumulation(capturing_logger):
    user_id = uuid4()

    bind_request_context("test-request-123")
    bind_user_context(user_id, "field_ops")
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["request_id"] == "test-request-123"
    assert kwargs["user_id"] == str(user_id)
    assert kwargs["role"] == "field_ops"


def test_request_log_context_starts_and_ends_clean(capturing_logger):
    bind_user_context(uuid4(), "viewer")

    with request_log_context("req-42"):
        structlog.get_logger().info("inside")
    structlog.get_logger().info("after")

    inside, after = (call.kwargs for call in capturing_logger.calls)
    assert inside["request_id"] == "req-42"
    assert "user_id" not in inside
    assert "request_id" not in after


def test_setup_logging_stamps_service_and_env():
    old_config = structlog.get_config()
    try:
        setup_logging(debug=False, environment="testing")
        processors = structlog.get_config()["processors"]
        event = {"event": "hello"}
        for processor in processors[:2]:
            event = processor(None, "info", event)
    finally:
        structlog.configure(**old_config)

    assert event["service"] == "apex-api"
    assert event["env"] == "testing"
