"""Structured logging for the APEX backend.

Every event carries the service name and environment. Request and user
identifiers are bound through structlog contextvars so that log lines
emitted deep inside a service can be tied back to the request and actor.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import EventDict, Processor, WrappedLogger

SERVICE_NAME = "apex-api"

# Libraries that log every query or connection at INFO
_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "resend")


def _service_info(environment: str) -> Processor:
    def processor(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("env", environment)
        return event_dict

    return processor


def setup_logging(debug: bool = False, environment: str = "development") -> None:
    """Route stdlib and structlog output to stdout.

    Debug mode renders colored console lines; otherwise each event is one
    JSON object for the log shipper.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _service_info(environment),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(user_id: UUID, role: str, email: str | None = None) -> None:
    """Attach the authenticated actor to subsequent log lines.

    Emails are personal data and are only logged when log_user_emails is set.
    """
    from src.apex.core.config import get_settings

    bind_contextvars(user_id=str(user_id), role=role)
    if email and get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    clear_contextvars()


@contextmanager
def request_log_context(request_id: str | None) -> Iterator[None]:
    """Scope bound log context to one request, starting and ending clean."""
    clear_contextvars()
    bind_request_context(request_id)
    try:
        yield
    finally:
        clear_contextvars()
