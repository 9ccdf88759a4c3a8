"""Task, note and time entry endpoints.

Tasks live inside their project's task document, so every write here
reads, edits and writes the whole document under a version check.
"""

from typing import Any

from fastapi import APIRouter, status

from src.apex.api.dependencies import (
    AuditServiceDep,
    CurrentUser,
    NoteAuthor,
    TaskDeleter,
    TaskEditor,
    TaskServiceDep,
    TimeLogger,
)
from src.apex.models import AuditAction, AuditCategory
from src.apex.schemas.task import (
    TaskCreate,
    TaskNoteCreate,
    TaskUpdate,
    TimeEntryCreate,
    TimeEntryResult,
)

router = APIRouter(prefix="/projects/{project_id}", tags=["tasks"])

_CONFLICT = {409: {"description": "Concurrent update could not be applied"}}


@router.get("/tasks")
async def list_tasks(
    project_id: str, current_user: CurrentUser, service: TaskServiceDep
) -> list[dict[str, Any]]:
    return await service.list_tasks(project_id)


@router.get("/tasks/{task_id}")
async def get_task(
    project_id: str, task_id: str, current_user: CurrentUser, service: TaskServiceDep
) -> dict[str, Any]:
    """Find a task anywhere in the tree, including nested subtasks."""
    return await service.get_task(project_id, task_id)


@router.post("/tasks", status_code=status.HTTP_201_CREATED, responses=_CONFLICT)
async def create_task(
    project_id: str,
    data: TaskCreate,
    current_user: TaskEditor,
    service: TaskServiceDep,
    audit: AuditServiceDep,
) -> dict[str, Any]:
    task = await service.create_task(project_id, data)
    await audit.log_success(
        AuditAction.TASK_CREATE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="task",
        project_id=project_id,
        task_id=task["id"],
        details={"name": task.get("name")},
    )
    return task


@router.post(
    "/tasks/{task_id}/subtasks", status_code=status.HTTP_201_CREATED, responses=_CONFLICT
)
async def create_subtask(
    project_id: str,
    task_id: str,
    data: TaskCreate,
    current_user: TaskEditor,
    service: TaskServiceDep,
    audit: AuditServiceDep,
) -> dict[str, Any]:
    subtask = await service.create_subtask(project_id, task_id, data)
    await audit.log_success(
        AuditAction.TASK_CREATE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="task",
        project_id=project_id,
        task_id=subtask["id"],
        details={"name": subtask.get("name"), "parent_task_id": task_id},
    )
    return subtask


@router.patch("/tasks/{task_id}", responses=_CONFLICT)
async def update_task(
    project_id: str,
    task_id: str,
    data: TaskUpdate,
    current_user: TaskEditor,
    service: TaskServiceDep,
    audit: AuditServiceDep,
) -> dict[str, Any]:
    """Merge the given fields into the task. The task id never changes."""
    task = await service.update_task(project_id, task_id, data)
    await audit.log_success(
        AuditAction.TASK_UPDATE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="task",
        project_id=project_id,
        task_id=task_id,
        details={"fields": sorted(data.changes())},
    )
    return task


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_CONFLICT)
async def delete_task(
    project_id: str,
    task_id: str,
    current_user: TaskDeleter,
    service: TaskServiceDep,
    audit: AuditServiceDep,
) -> None:
    await service.delete_task(project_id, task_id)
    await audit.log_success(
        AuditAction.TASK_DELETE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="task",
        project_id=project_id,
        task_id=task_id,
    )


@router.post("/tasks/{task_id}/notes", status_code=status.HTTP_201_CREATED, responses=_CONFLICT)
async def add_task_note(
    project_id: str,
    task_id: str,
    data: TaskNoteCreate,
    current_user: NoteAuthor,
    service: TaskServiceDep,
) -> dict[str, Any]:
    return await service.add_note(project_id, task_id, data, author=current_user.name)


@router.get("/time-entries")
async def list_time_entries(
    project_id: str, current_user: CurrentUser, service: TaskServiceDep
) -> list[dict[str, Any]]:
    return await service.list_time_entries(project_id)


@router.post(
    "/time-entries",
    response_model=TimeEntryResult,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Project or root-level task not found"}, **_CONFLICT},
)
async def create_time_entry(
    project_id: str,
    data: TimeEntryCreate,
    current_user: TimeLogger,
    service: TaskServiceDep,
    audit: AuditServiceDep,
) -> TimeEntryResult:
    """Log hours against a task and roll them up to its parent task and the project."""
    outcome = await service.record_time_entry(project_id, data, employee=current_user.name)
    await audit.log_success(
        AuditAction.TIME_ENTRY_CREATE,
        AuditCategory.PROJECT,
        actor=current_user,
        resource="time_entry",
        project_id=project_id,
        task_id=str(data.task_id),
        details={"hours": float(data.hours), "entry_id": outcome.entry["id"]},
    )
    return TimeEntryResult(
        entry=outcome.entry,
        task=outcome.hours.task,
        parent_task=outcome.hours.parent_task,
        project_actual_hours=float(outcome.hours.project_hours),
    )
