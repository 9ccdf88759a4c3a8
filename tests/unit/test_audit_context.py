"""Unit tests for audit context module."""

from dataclasses import FrozenInstanceError

import pytest
from starlette.requests import Request

from src.apex.core.audit_context import (
    AuditContext,
    audit_scope,
    get_audit_context,
    get_client_ip,
)

pytestmark = pytest.mark.unit


def make_request(headers: dict[str, str], client: tuple[str, int] | None = ("10.0.0.2", 5000)):
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
            "client": client,
        }
    )


def test_audit_context_is_immutable():
    ctx = AuditContext(ip_address="1.2.3.4")
    with pytest.raises(FrozenInstanceError):
        ctx.ip_address = "5.6.7.8"  # type: ignore[misc]


def test_no_context_outside_a_request():
    assert get_audit_context() is None


def test_scope_sets_and_restores():
    ctx = AuditContext("192.168.1.1", "Mozilla/5.0", "abc-123")

    with audit_scope(ctx):
        assert get_audit_context() is ctx

    assert get_audit_context() is None


def test_nested_scope_restores_outer():
    outer = AuditContext(request_id="outer")

    with audit_scope(outer), audit_scope(AuditContext(request_id="inner")):
        assert get_audit_context().request_id == "inner"

    assert get_audit_context() is None


def test_values_are_clipped_to_column_widths():
    ctx = AuditContext.clipped(ip_address="1" * 60, user_agent="x" * 600, request_id="r" * 40)

    assert len(ctx.ip_address) == 45
    assert len(ctx.user_agent) == 500
    assert len(ctx.request_id) == 36


def test_from_request_prefers_forwarded_for():
    request = make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "curl/8"})

    ctx = AuditContext.from_request(request, "req-1")

    assert ctx == AuditContext("203.0.113.7", "curl/8", "req-1")


def test_from_request_without_client():
    ctx = AuditContext.from_request(make_request({}, client=None), None)

    assert ctx == AuditContext()


class TestGetClientIp:
    def test_first_forwarded_address_wins(self):
        assert get_client_ip("203.0.113.7, 10.0.0.1", "10.0.0.2") == "203.0.113.7"

    def test_blank_forwarded_header_falls_back(self):
        assert get_client_ip(" , 10.0.0.1", "10.0.0.2") == "10.0.0.2"

    def test_falls_back_to_client_host(self):
        assert get_client_ip(None, "10.0.0.2") == "10.0.0.2"

    def test_nothing_known(self):
        assert get_client_ip(None, None) is None
