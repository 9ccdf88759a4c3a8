"""Project endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.apex.api.dependencies import (
    AuditServiceDep,
    CurrentUser,
    ProjectDeleter,
    ProjectEditor,
    ProjectServiceDep,
)
from src.apex.models import AuditAction, AuditCategory, ProjectStatus
from src.apex.schemas.pagination import PaginatedResponse
from src.apex.schemas.project import (
    ProjectCreate,
    ProjectHealthRead,
    ProjectRead,
    ProjectStatsRead,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=PaginatedResponse[ProjectRead],
    responses={200: {"description": "Paginated list of projects, newest first"}},
)
async def list_projects(
    current_user: CurrentUser,
    service: ProjectServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
    status_filter: Annotated[ProjectStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(max_length=100, description="Name or client")] = None,
) -> PaginatedResponse[ProjectRead]:
    projects, next_cursor, has_more = await service.list_projects(
        cursor=cursor,
        limit=limit,
        status=status_filter.value if status_filter else None,
        search=search,
    )
    return PaginatedResponse(
        items=[ProjectRead.model_validate(p) for p in projects],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/stats", response_model=ProjectStatsRead)
async def get_project_stats(
    current_user: CurrentUser, service: ProjectServiceDep
) -> ProjectStatsRead:
    """Portfolio counts by status, budget totals and average progress."""
    return ProjectStatsRead.model_validate(await service.get_stats())


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: str, current_user: CurrentUser, service: ProjectServiceDep
) -> ProjectRead:
    return ProjectRead.model_validate(await service.get_project(project_id))


@router.get("/{project_id}/children", response_model=list[ProjectRead])
async def list_child_projects(
    project_id: str, current_user: CurrentUser, service: ProjectServiceDep
) -> list[ProjectRead]:
    children = await service.list_children(project_id)
    return [ProjectRead.model_validate(child) for child in children]


@router.get("/{project_id}/health", response_model=ProjectHealthRead)
async def get_project_health(
    project_id: str, current_user: CurrentUser, service: ProjectServiceDep
) -> ProjectHealthRead:
    report = await service.get_health(project_id)
    return ProjectHealthRead(
        project_id=report.project_id,
        health=report.health.value,
        progress=report.progress,
        task_count=report.task_count,
        overdue_tasks=report.overdue_tasks,
    )


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Parent project not found"},
        409: {"description": "Project id exists or parent is itself a child"},
    },
)
async def create_project(
    data: ProjectCreate,
    current_user: ProjectEditor,
    service: ProjectServiceDep,
    audit: AuditServiceDep,
) -> ProjectRead:
    project = await service.create_project(data)
    await audit.log_success(
        AuditAction.PROJECT_CREATE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="project",
        project_id=project.id,
        details={"name": project.name, "parent_project_id": project.parent_project_id},
    )
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    responses={
        404: {"description": "Project not found"},
        409: {"description": "Version mismatch or invalid hierarchy change"},
    },
)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    current_user: ProjectEditor,
    service: ProjectServiceDep,
    audit: AuditServiceDep,
) -> ProjectRead:
    project = await service.update_project(project_id, data)
    await audit.log_success(
        AuditAction.PROJECT_UPDATE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="project",
        project_id=project.id,
        details={"fields": sorted(data.model_dump(exclude_unset=True))},
    )
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Project not found"}},
)
async def delete_project(
    project_id: str,
    current_user: ProjectDeleter,
    service: ProjectServiceDep,
    audit: AuditServiceDep,
) -> None:
    """Delete a project. Child projects are detached and become top-level."""
    project = await service.delete_project(project_id)
    await audit.log_success(
        AuditAction.PROJECT_DELETE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="project",
        project_id=project_id,
        details={"name": project.name},
    )
