"""Audit log endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.apex.api.dependencies import AuditReader, AuditServiceDep, CurrentUser
from src.apex.models import AuditCategory, AuditSeverity
from src.apex.schemas.audit import AuditLogAccepted, AuditLogCreate, AuditLogRead
from src.apex.schemas.pagination import OffsetPage

router = APIRouter(prefix="/audit", tags=["audit"])

LimitQuery = Annotated[int, Query(ge=1, le=1000, description="Items per page")]
OffsetQuery = Annotated[int, Query(ge=0, description="Items to skip")]
ProjectQuery = Annotated[str | None, Query(max_length=50, description="Filter by project")]
CategoryQuery = Annotated[AuditCategory | None, Query(description="Filter by category")]
SeverityQuery = Annotated[AuditSeverity | None, Query(description="Filter by severity")]
ActionQuery = Annotated[str | None, Query(max_length=500, description="Filter by action")]


@router.post("/log", response_model=AuditLogAccepted, status_code=status.HTTP_202_ACCEPTED)
async def record_client_event(
    data: AuditLogCreate,
    current_user: CurrentUser,
    audit_service: AuditServiceDep,
) -> AuditLogAccepted:
    """Record an event reported by the client application.

    Recording is best effort; `recorded` is false when the entry could not be stored.
    """
    entry = await audit_service.log_action(
        data.action,
        category=data.category,
        severity=data.severity,
        actor=current_user,
        resource=data.resource,
        details={"message": data.details} if data.details else None,
        project_id=data.project_id,
        task_id=data.task_id,
    )
    return AuditLogAccepted(recorded=entry is not None, id=entry.id if entry else None)


@router.get(
    "/log",
    response_model=OffsetPage[AuditLogRead],
    responses={403: {"description": "audit.read permission required"}},
)
async def list_audit_logs(
    _: AuditReader,
    audit_service: AuditServiceDep,
    limit: LimitQuery = 100,
    offset: OffsetQuery = 0,
    project_id: ProjectQuery = None,
    category: CategoryQuery = None,
    severity: SeverityQuery = None,
    action: ActionQuery = None,
) -> OffsetPage[AuditLogRead]:
    """Newest entries first, with the total number of matching entries."""
    logs, total = await audit_service.list_logs(
        limit=limit,
        offset=offset,
        project_id=project_id,
        category=category.value if category else None,
        severity=severity.value if severity else None,
        action=action,
    )
    return OffsetPage(
        items=[AuditLogRead.model_validate(log) for log in logs],
        total=total,
        limit=limit,
        offset=offset,
    )
