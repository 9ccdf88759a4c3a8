"""Hardening headers added to every response."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

DEFAULT_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}

# Responses carrying credentials or personal data
_PRIVATE_PATHS = frozenset(
    {
        "/api/v1/auth/login",
        "/api/v1/auth/register",
        "/api/v1/auth/me",
        "/api/v1/auth/reset-password",
        "/api/v1/users/me",
        "/api/v1/users/me/password",
    }
)
_NO_STORE = {"Cache-Control": "no-store, no-cache, must-revalidate", "Pragma": "no-cache"}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Set the default headers plus the CSP.

    ``overrides`` replaces individual defaults; an empty value drops the
    header entirely.
    """

    def __init__(
        self,
        app: ASGIApp,
        content_security_policy: str,
        overrides: dict[str, str] | None = None,
    ):
        super().__init__(app)
        merged = {**DEFAULT_HEADERS, "Content-Security-Policy": content_security_policy}
        merged.update(overrides or {})
        self.headers = {name: value for name, value in merged.items() if value}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        if request.url.path in _PRIVATE_PATHS:
            response.headers.update(_NO_STORE)
        return response
