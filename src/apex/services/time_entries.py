"""Hour rollup for time entries.

Time entries address root-level tasks. A root task may name a sibling as its
parent through `parentTaskId`; that parent's hours are always the sum of its
children's. The project total skips tasks whose `parentTaskId` names another
root task, so child hours already folded into a parent are not counted twice.
A task whose parent is missing, or is itself, counts toward the total directly.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from src.apex.core.exceptions import TaskNotFoundError
from src.apex.services.rollup import to_decimal
from src.apex.services.task_tree import Task, same_id

HOURS_PRECISION = Decimal("0.01")


@dataclass(frozen=True)
class HourRollup:
    tasks: list[Task]
    task: Task
    parent_task: Task | None
    project_hours: Decimal


def _hours(task: Task) -> Decimal:
    return to_decimal(task.get("actualHours"))


def _as_number(value: Decimal) -> float:
    return float(value.quantize(HOURS_PRECISION))


def _has_parent(task: Task) -> bool:
    return task.get("parentTaskId") not in (None, "")


def _find_parent(roots: list[Task], task: Task) -> Task | None:
    if not _has_parent(task):
        return None
    parent_id = task["parentTaskId"]
    return next(
        (t for t in roots if t is not task and same_id(t.get("id"), parent_id)), None
    )


def _root_tasks(tasks: Any) -> list[Task]:
    if not isinstance(tasks, list):
        return []
    return [task for task in tasks if isinstance(task, dict)]


def project_hours(tasks: Any) -> Decimal:
    """Sum of actualHours over root tasks not folded into another root task."""
    roots = _root_tasks(tasks)
    total = sum(
        (_hours(task) for task in roots if _find_parent(roots, task) is None),
        Decimal("0"),
    )
    return total.quantize(HOURS_PRECISION)


def record_hours(tasks: Any, task_id: Any, hours: float | Decimal) -> HourRollup:
    """Add hours to a root task and resync its parent task and the project total.

    Mutates the task dicts in place.

    Raises:
        TaskNotFoundError: No root-level task has this id. Tasks that only
            exist inside a nested `subtasks` list are not addressable here.
    """
    roots = _root_tasks(tasks)
    task = next((t for t in roots if same_id(t.get("id"), task_id)), None)
    if task is None:
        raise TaskNotFoundError(task_id)

    task["actualHours"] = _as_number(_hours(task) + to_decimal(hours))

    parent_task = _find_parent(roots, task)
    if parent_task is not None:
        children = [t for t in roots if _find_parent(roots, t) is parent_task]
        parent_task["actualHours"] = _as_number(
            sum((_hours(child) for child in children), Decimal("0"))
        )

    return HourRollup(
        tasks=tasks,
        task=task,
        parent_task=parent_task,
        project_hours=project_hours(roots),
    )
