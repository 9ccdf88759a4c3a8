"""Task service - edits to a project's task document and time entries.

Every edit is a read-modify-write of the whole document guarded by the
project's version. A write that loses the race is retried on a fresh read,
up to max_attempts, before the request fails with a conflict.
"""

import copy
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.apex.core.exceptions import (
    ConcurrentUpdateError,
    ConflictError,
    ProjectNotFoundError,
    TaskNotFoundError,
)
from src.apex.core.logging import get_logger
from src.apex.models import Project
from src.apex.repositories import ProjectRepository
from src.apex.schemas.task import TaskCreate, TaskNoteCreate, TaskUpdate, TimeEntryCreate
from src.apex.services import task_tree
from src.apex.services.rollup import RollupService
from src.apex.services.task_tree import Task
from src.apex.services.time_entries import HourRollup, record_hours

logger = get_logger(__name__)

T = TypeVar("T")

# Receives the freshly read project and a private copy of its task list to edit.
# Returns the caller's result plus any extra project columns to write.
TaskMutation = Callable[[Project, list[Task]], tuple[T, dict[str, Any]]]


def new_id(prefix: str) -> str:
    return f"{prefix}{uuid4().hex[:12]}"


def timestamp() -> str:
    return datetime.now(UTC).isoformat()


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _ensure_unique_ids(existing: Any, incoming: Any) -> None:
    """Task ids are unique across a project's whole tree, nested subtasks included."""
    clash = task_tree.first_clashing_id(existing, incoming)
    if clash is not None:
        raise ConflictError(f"Task {clash} already exists in this project")


@dataclass(frozen=True)
class TimeEntryOutcome:
    entry: dict[str, Any]
    hours: HourRollup


class TaskService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        session: AsyncSession,
        rollup_service: RollupService | None = None,
        max_attempts: int = 3,
    ):
        self.project_repo = project_repo
        self.session = session
        self.rollup_service = rollup_service or RollupService(project_repo)
        self.max_attempts = max_attempts

    async def _load(self, project_id: str) -> Project:
        project = await self.project_repo.get_by_id(project_id, refresh=True)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def _mutate(self, project_id: str, mutation: TaskMutation[T]) -> T:
        for attempt in range(1, self.max_attempts + 1):
            project = await self._load(project_id)
            tasks = copy.deepcopy(_as_list(project.tasks))
            try:
                result, extra = mutation(project, tasks)
                written = await self.project_repo.compare_and_update(
                    project, {"tasks": tasks, **extra}
                )
                if written:
                    if project.parent_project_id:
                        await self.rollup_service.recompute_parent(project.parent_project_id)
                    await self.session.commit()
                    return result
                await self.session.rollback()
            except Exception:
                await self.session.rollback()
                raise

            logger.warning(
                "Concurrent task document update, retrying",
                project_id=project_id,
                attempt=attempt,
                max_attempts=self.max_attempts,
            )

        raise ConcurrentUpdateError(project_id)

    async def list_tasks(self, project_id: str) -> list[Task]:
        project = await self._load(project_id)
        return _as_list(project.tasks)

    async def get_task(self, project_id: str, task_id: str) -> Task:
        project = await self._load(project_id)
        location = task_tree.find_task(project.tasks, task_id)
        if location is None:
            raise TaskNotFoundError(task_id)
        return location.task

    def _build_task(self, tasks: list[Task], payload: TaskCreate) -> Task:
        task = payload.model_dump(by_alias=True, exclude_none=True)
        task.setdefault("id", new_id("t_"))
        _ensure_unique_ids(tasks, [task])
        now = timestamp()
        task["createdAt"] = now
        task["updatedAt"] = now
        return task

    async def create_task(self, project_id: str, payload: TaskCreate) -> Task:
        """Append a root-level task."""

        def mutation(project: Project, tasks: list[Task]) -> tuple[Task, dict[str, Any]]:
            task = self._build_task(tasks, payload)
            tasks.append(task)
            return task, {}

        task = await self._mutate(project_id, mutation)
        logger.info("Task created", project_id=project_id, task_id=task["id"])
        return task

    async def create_subtask(
        self, project_id: str, parent_task_id: str, payload: TaskCreate
    ) -> Task:
        """Append a task to another task's nested `subtasks` list."""

        def mutation(project: Project, tasks: list[Task]) -> tuple[Task, dict[str, Any]]:
            subtask = self._build_task(tasks, payload)
            if task_tree.add_subtask(tasks, parent_task_id, subtask) is None:
                raise TaskNotFoundError(parent_task_id)
            return subtask, {}

        subtask = await self._mutate(project_id, mutation)
        logger.info(
            "Subtask created",
            project_id=project_id,
            parent_task_id=parent_task_id,
            task_id=subtask["id"],
        )
        return subtask

    async def update_task(self, project_id: str, task_id: str, payload: TaskUpdate) -> Task:
        changes = payload.changes()

        def mutation(project: Project, tasks: list[Task]) -> tuple[Task, dict[str, Any]]:
            location = task_tree.find_task(tasks, task_id)
            if location is None:
                raise TaskNotFoundError(task_id)
            if "subtasks" in changes:
                # The task's current subtree is replaced, so its ids may be reused
                subtree = task_tree.iter_tasks(location.task.get("subtasks"))
                replaced = {id(t) for t in subtree}
                kept = [
                    {"id": t.get("id")}
                    for t in task_tree.iter_tasks(tasks)
                    if id(t) not in replaced
                ]
                _ensure_unique_ids(kept, changes["subtasks"])
            task = task_tree.update_task(tasks, task_id, {**changes, "updatedAt": timestamp()})
            return task, {}

        task = await self._mutate(project_id, mutation)
        logger.info("Task updated", project_id=project_id, task_id=task_id, fields=sorted(changes))
        return task

    async def delete_task(self, project_id: str, task_id: str) -> None:
        def mutation(project: Project, tasks: list[Task]) -> tuple[None, dict[str, Any]]:
            if not task_tree.remove_task(tasks, task_id):
                raise TaskNotFoundError(task_id)
            return None, {}

        await self._mutate(project_id, mutation)
        logger.info("Task deleted", project_id=project_id, task_id=task_id)

    async def add_note(
        self, project_id: str, task_id: str, payload: TaskNoteCreate, author: str
    ) -> dict[str, Any]:
        """Append a note to a task's notesThread."""

        def mutation(project: Project, tasks: list[Task]) -> tuple[dict[str, Any], dict[str, Any]]:
            location = task_tree.find_task(tasks, task_id)
            if location is None:
                raise TaskNotFoundError(task_id)
            note = {
                "id": new_id("n_"),
                "author": payload.author or author,
                "content": payload.content,
                "timestamp": timestamp(),
            }
            thread = location.task.get("notesThread")
            if not isinstance(thread, list):
                thread = []
                location.task["notesThread"] = thread
            thread.append(note)
            location.task["updatedAt"] = note["timestamp"]
            return note, {}

        return await self._mutate(project_id, mutation)

    async def list_time_entries(self, project_id: str) -> list[dict[str, Any]]:
        project = await self._load(project_id)
        return _as_list(project.time_entries)

    async def record_time_entry(
        self, project_id: str, payload: TimeEntryCreate, employee: str
    ) -> TimeEntryOutcome:
        """Log hours against a root task and roll them up.

        Raises:
            TaskNotFoundError: The task is not a root-level task of the project.
        """

        def mutation(
            project: Project, tasks: list[Task]
        ) -> tuple[TimeEntryOutcome, dict[str, Any]]:
            hours = record_hours(tasks, payload.task_id, payload.hours)
            entry = {
                "id": new_id("TE_"),
                "taskId": payload.task_id,
                "employee": payload.employee or employee,
                "hours": float(payload.hours),
                "date": (payload.date.isoformat() if payload.date else timestamp()),
                "description": payload.description or "",
                "createdAt": timestamp(),
            }
            extra = {
                "time_entries": [*_as_list(project.time_entries), entry],
                "actual_hours": hours.project_hours,
            }
            return TimeEntryOutcome(entry=entry, hours=hours), extra

        outcome = await self._mutate(project_id, mutation)
        logger.info(
            "Time entry recorded",
            project_id=project_id,
            task_id=payload.task_id,
            hours=str(payload.hours),
            project_hours=str(outcome.hours.project_hours),
        )
        return outcome
