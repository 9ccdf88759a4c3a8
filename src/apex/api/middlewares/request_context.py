"""Request context middleware.

Opens the per-request log context and captures client IP, user agent and
request ID so audit entries written anywhere during the request can be
attributed without threading the request object through the service layer.
"""

from asgi_correlation_id import correlation_id
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.apex.core.audit_context import AuditContext, audit_scope
from src.apex.core.logging import request_log_context


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = correlation_id.get()
        with (
            request_log_context(request_id),
            audit_scope(AuditContext.from_request(request, request_id)),
        ):
            return await call_next(request)
