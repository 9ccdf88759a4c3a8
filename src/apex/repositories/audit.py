"""Repository for AuditLog entity."""

from sqlalchemy import func
from sqlmodel import select

from src.apex.models import AuditLog
from src.apex.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def list_page(
        self,
        limit: int = 100,
        offset: int = 0,
        project_id: str | None = None,
        category: str | None = None,
        severity: str | None = None,
        action: str | None = None,
    ) -> tuple[list[AuditLog], int]:
        """Newest-first page of audit logs plus the total matching count."""
        filters = []
        if project_id:
            filters.append(AuditLog.project_id == project_id)
        if category:
            filters.append(AuditLog.category == category)
        if severity:
            filters.append(AuditLog.severity == severity)
        if action:
            filters.append(AuditLog.action == action)

        total_result = await self.session.execute(
            select(func.count()).select_from(AuditLog).where(*filters)
        )
        result = await self.session.execute(
            select(AuditLog)
            .where(*filters)
            .order_by(AuditLog.created_at.desc())  # type: ignore[attr-defined]
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), int(total_result.scalar_one())
