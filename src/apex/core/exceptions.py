"""Domain errors and exception handlers with request_id in responses."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.apex.core.logging import get_logger

logger = get_logger(__name__)


class ApexError(Exception):
    """Base class for errors raised by services.

    Each subclass carries the HTTP status the API reports for it, so routers
    can let these propagate instead of translating them one by one.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: Any):
        super().__init__(str(detail))
        self.detail = detail


class BadRequestError(ApexError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ApexError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApexError):
    status_code = status.HTTP_409_CONFLICT


class ValidationFailedError(ApexError):
    status_code = 422


class AuthenticationError(ApexError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(ApexError):
    status_code = status.HTTP_403_FORBIDDEN


class PasswordChangeRequiredError(PermissionDeniedError):
    def __init__(self, detail: str, reason: str):
        super().__init__(detail)
        self.reason = reason


class TooManyRequestsError(ApexError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str):
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: Any):
        super().__init__("Task not found")
        self.task_id = task_id


class ConcurrentUpdateError(ConflictError):
    def __init__(self, project_id: str):
        super().__init__(
            f"Project {project_id} was modified by another request, reload and try again"
        )
        self.project_id = project_id


def _error_body(detail: Any) -> dict[str, Any]:
    return {"detail": detail, "request_id": correlation_id.get()}


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(ApexError)
    async def apex_error_handler(request: Request, exc: ApexError) -> JSONResponse:
        content = _error_body(exc.detail)
        if isinstance(exc, PasswordChangeRequiredError):
            content["reason"] = exc.reason
        if exc.status_code >= status.HTTP_409_CONFLICT:
            logger.warning(
                "Request rejected",
                error=type(exc).__name__,
                status_code=exc.status_code,
                path=request.url.path,
            )
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
