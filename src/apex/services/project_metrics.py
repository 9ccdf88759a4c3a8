"""Task-derived progress, RAG health and portfolio statistics for projects."""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from src.apex.models import Project, ProjectStatus
from src.apex.models.base import utc_now
from src.apex.services.rollup import canonical_status, round_half_up, to_decimal


class ProjectHealth(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    GRAY = "gray"


SLIPPING_PROGRESS_THRESHOLD = 25


def _root_tasks(tasks: Any) -> list[dict[str, Any]]:
    if not isinstance(tasks, list):
        return []
    return [task for task in tasks if isinstance(task, dict)]


def _parse_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def _rag(task: dict[str, Any]) -> str:
    value = task.get("ragStatus")
    return value.lower() if isinstance(value, str) else ""


def task_progress(tasks: Any) -> int:
    """Percent complete over root tasks: completed counts 1, in-progress 0.5."""
    roots = _root_tasks(tasks)
    if not roots:
        return 0
    completed = sum(1 for task in roots if task.get("status") == "completed")
    in_progress = sum(1 for task in roots if task.get("status") == "in-progress")
    score = (Decimal(completed) + Decimal(in_progress) / 2) / len(roots) * 100
    return round_half_up(score)


def is_overdue(task: dict[str, Any], now: datetime) -> bool:
    if task.get("status") == "completed":
        return False
    end = _parse_date(task.get("endDate"))
    return end is not None and end < now


def project_health(project: Project, now: datetime | None = None) -> ProjectHealth:
    """RAG indicator from task deadlines, task RAG flags and progress."""
    roots = _root_tasks(project.tasks)
    if not roots:
        return ProjectHealth.GRAY

    now = now or utc_now()
    if any(is_overdue(task, now) or _rag(task) == "red" for task in roots):
        return ProjectHealth.RED

    slipping = (
        task_progress(roots) < SLIPPING_PROGRESS_THRESHOLD
        and canonical_status(project.status) == ProjectStatus.IN_PROGRESS.value
    )
    if slipping or any(_rag(task) == "yellow" for task in roots):
        return ProjectHealth.YELLOW
    return ProjectHealth.GREEN


@dataclass
class ProjectStats:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    total_budget: Decimal = Decimal("0")
    total_actual: Decimal = Decimal("0")
    budget_variance: Decimal = Decimal("0")
    average_progress: int = 0


def project_stats(projects: Sequence[Project]) -> ProjectStats:
    """Portfolio summary; a project's budget is its estimate, falling back to budget."""
    if not projects:
        return ProjectStats()

    total_budget = Decimal("0")
    total_actual = Decimal("0")
    for project in projects:
        estimate = to_decimal(project.estimated_budget)
        total_budget += estimate if estimate else to_decimal(project.budget)
        total_actual += to_decimal(project.actual_budget)

    progress_sum = sum(task_progress(project.tasks) for project in projects)
    return ProjectStats(
        total=len(projects),
        by_status=dict(Counter(project.status for project in projects)),
        total_budget=total_budget,
        total_actual=total_actual,
        budget_variance=total_actual - total_budget,
        average_progress=round_half_up(Decimal(progress_sum) / len(projects)),
    )
