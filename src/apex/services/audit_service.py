"""Audit trail for APEX: who changed which project, task, user or setting."""

import contextlib
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.apex.core.audit_context import get_audit_context
from src.apex.core.logging import get_logger
from src.apex.models import AuditAction, AuditCategory, AuditLog, AuditSeverity, User
from src.apex.repositories import AuditLogRepository

logger = get_logger(__name__)


def _value(item: Any) -> Any:
    return item.value if hasattr(item, "value") else item


class AuditService:
    """Writes audit entries on a session of its own.

    Writing an entry never raises: a failed insert is rolled back and logged,
    and the request that triggered it carries on.
    """

    def __init__(self, audit_repo: AuditLogRepository, session: AsyncSession):
        self.audit_repo = audit_repo
        self.session = session

    async def log_action(
        self,
        action: AuditAction | str,
        category: AuditCategory | str = AuditCategory.GENERAL,
        severity: AuditSeverity | str = AuditSeverity.INFO,
        actor: User | None = None,
        user_label: str | None = None,
        resource: str | None = None,
        details: dict[str, Any] | None = None,
        project_id: str | None = None,
        task_id: str | None = None,
    ) -> AuditLog | None:
        """Record an audit log entry.

        Request metadata (IP, user agent, request_id) comes from the audit
        context. Failures are logged but do not raise.

        Args:
            action: What happened (AuditAction or free text from clients)
            category: Area of the system the action belongs to
            severity: info, warning or critical
            actor: Authenticated user performing the action, if any
            user_label: Display label when there is no actor (e.g. attempted email)
            resource: Kind of thing affected, e.g. "project"
            details: Structured extra information
            project_id: Project the action concerns
            task_id: Task the action concerns

        Returns:
            The stored entry, or None when it could not be written
        """
        try:
            ctx = get_audit_context()

            audit_log = AuditLog(
                user_id=actor.id if actor else None,
                user=(actor.email if actor else user_label),
                action=_value(action),
                resource=resource,
                details=details,
                project_id=project_id,
                task_id=str(task_id) if task_id is not None else None,
                category=_value(category),
                severity=_value(severity),
                ip_address=ctx.ip_address if ctx else None,
                user_agent=ctx.user_agent if ctx else None,
                request_id=ctx.request_id if ctx else None,
            )

            self.audit_repo.add(audit_log)
            await self.session.commit()

            logger.debug(
                "Audit log recorded",
                action=audit_log.action,
                category=audit_log.category,
                project_id=project_id,
            )
            return audit_log

        except Exception as e:
            logger.warning(
                "Failed to record audit log",
                action=_value(action),
                error=str(e),
            )
            # Isolated session, the business transaction is unaffected
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return None

    async def log_success(
        self,
        action: AuditAction | str,
        category: AuditCategory | str,
        actor: User | None = None,
        **kwargs: Any,
    ) -> AuditLog | None:
        return await self.log_action(
            action, category=category, severity=AuditSeverity.INFO, actor=actor, **kwargs
        )

    async def log_failure(
        self,
        action: AuditAction | str,
        category: AuditCategory | str,
        reason: str,
        actor: User | None = None,
        user_label: str | None = None,
        **kwargs: Any,
    ) -> AuditLog | None:
        details = dict(kwargs.pop("details", None) or {})
        details["reason"] = reason[:1000]
        return await self.log_action(
            action,
            category=category,
            severity=AuditSeverity.WARNING,
            actor=actor,
            user_label=user_label,
            details=details,
            **kwargs,
        )

    async def list_logs(
        self,
        limit: int = 100,
        offset: int = 0,
        project_id: str | None = None,
        category: str | None = None,
        severity: str | None = None,
        action: str | None = None,
    ) -> tuple[list[AuditLog], int]:
        return await self.audit_repo.list_page(
            limit=limit,
            offset=offset,
            project_id=project_id,
            category=category,
            severity=severity,
            action=action,
        )
