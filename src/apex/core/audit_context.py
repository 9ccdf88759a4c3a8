"""Request metadata attached to audit log entries.

The request context middleware captures it once per request and
AuditService reads it when an entry is written, so services never see the
request object.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from starlette.requests import Request

# audit_logs column widths
IP_ADDRESS_MAX_LENGTH = 45
USER_AGENT_MAX_LENGTH = 500
REQUEST_ID_MAX_LENGTH = 36

_audit_context: ContextVar["AuditContext | None"] = ContextVar("audit_context", default=None)


def _clip(value: str | None, limit: int) -> str | None:
    return value[:limit] if value else value


def get_client_ip(forwarded_for: str | None, client_host: str | None) -> str | None:
    """First X-Forwarded-For hop, else the socket peer."""
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    return client_host


@dataclass(frozen=True)
class AuditContext:
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None

    @classmethod
    def clipped(
        cls,
        ip_address: str | None = None,
        user_agent: str | None = None,
        request_id: str | None = None,
    ) -> "AuditContext":
        """Build a context whose values fit the audit_logs columns."""
        return cls(
            ip_address=_clip(ip_address, IP_ADDRESS_MAX_LENGTH),
            user_agent=_clip(user_agent, USER_AGENT_MAX_LENGTH),
            request_id=_clip(request_id, REQUEST_ID_MAX_LENGTH),
        )

    @classmethod
    def from_request(cls, request: Request, request_id: str | None) -> "AuditContext":
        client_host = request.client.host if request.client else None
        return cls.clipped(
            ip_address=get_client_ip(request.headers.get("x-forwarded-for"), client_host),
            user_agent=request.headers.get("user-agent"),
            request_id=request_id,
        )


def get_audit_context() -> AuditContext | None:
    return _audit_context.get()


@contextmanager
def audit_scope(ctx: AuditContext) -> Iterator[AuditContext]:
    """Make ctx the current audit context until the block exits."""
    token = _audit_context.set(ctx)
    try:
        yield ctx
    finally:
        _audit_context.reset(token)
