"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.apex.core.config import Settings

from .request_context import RequestContextMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = ["setup_middlewares", "RequestContextMiddleware", "SecurityHeadersMiddleware"]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Install middlewares; the last one added runs outermost.

    CorrelationIdMiddleware must wrap everything else so the request ID is
    set before the log and audit contexts are opened.
    """
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, content_security_policy=settings.csp_policy)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Auth-Token", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(CorrelationIdMiddleware)
