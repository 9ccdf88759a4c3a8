"""Parent project rollup.

A parent project's estimated budget, actual budget, actual hours, progress
and status are derived from its direct children. Each recompute reads the
full child set and overwrites the parent's figures, so repeated or racing
recomputes converge on the same values.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from src.apex.core.logging import get_logger
from src.apex.models import Project, ProjectStatus
from src.apex.repositories.project import ProjectRepository

logger = get_logger(__name__)

# Lower rank is worse. The parent shows the worst rank among its children.
STATUS_RANK: dict[str, int] = {
    ProjectStatus.CANCELLED.value: 0,
    ProjectStatus.ON_HOLD.value: 1,
    ProjectStatus.PLANNING.value: 2,
    ProjectStatus.IN_PROGRESS.value: 3,
    ProjectStatus.COMPLETED.value: 4,
}
STATUS_ALIASES: dict[str, str] = {ProjectStatus.ACTIVE.value: ProjectStatus.IN_PROGRESS.value}
DEFAULT_STATUS = ProjectStatus.PLANNING.value

_ZERO = Decimal("0")


@dataclass(frozen=True)
class ProjectRollup:
    estimated_budget: Decimal
    actual_budget: Decimal
    actual_hours: Decimal
    progress: int
    status: str
    child_count: int

    def as_values(self) -> dict[str, Any]:
        """Column values written onto the parent row."""
        return {
            "estimated_budget": self.estimated_budget,
            "actual_budget": self.actual_budget,
            "actual_hours": self.actual_hours,
            "progress": self.progress,
            "status": self.status,
        }


def to_decimal(value: Any) -> Decimal:
    """Numeric value or zero for anything missing, non-numeric or non-finite."""
    if value is None or isinstance(value, bool):
        return _ZERO
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return _ZERO
    return number if number.is_finite() else _ZERO


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def canonical_status(status: Any) -> str:
    """Map a stored status onto the ranked set; unknown values rank as planning."""
    if status is None:
        return DEFAULT_STATUS
    if isinstance(status, Enum):
        status = status.value
    name = STATUS_ALIASES.get(str(status), str(status))
    return name if name in STATUS_RANK else DEFAULT_STATUS


def worst_status(statuses: Sequence[Any]) -> str | None:
    """Lowest-ranked status, the first one seen wins ties."""
    worst: str | None = None
    for status in statuses:
        candidate = canonical_status(status)
        if worst is None or STATUS_RANK[candidate] < STATUS_RANK[worst]:
            worst = candidate
    return worst


def compute_rollup(children: Sequence[Project]) -> ProjectRollup | None:
    """Aggregate child figures, or None when there are no children."""
    if not children:
        return None

    status = worst_status([child.status for child in children]) or DEFAULT_STATUS
    progress_total = sum((to_decimal(child.progress) for child in children), _ZERO)

    return ProjectRollup(
        estimated_budget=sum((to_decimal(c.estimated_budget) for c in children), _ZERO),
        actual_budget=sum((to_decimal(c.actual_budget) for c in children), _ZERO),
        actual_hours=sum((to_decimal(c.actual_hours) for c in children), _ZERO),
        progress=round_half_up(progress_total / len(children)),
        status=status,
        child_count=len(children),
    )


class RollupService:
    """Recomputes a parent project from its children.

    Writes go through the injected repository's session and are left
    uncommitted so the caller can commit them with the child change.
    """

    def __init__(self, project_repo: ProjectRepository):
        self.project_repo = project_repo

    async def recompute_parent(self, parent_id: str) -> ProjectRollup | None:
        children = await self.project_repo.list_children(parent_id)
        rollup = compute_rollup(children)
        if rollup is None:
            logger.debug("Parent has no children, rollup skipped", parent_id=parent_id)
            return None

        await self.project_repo.apply_rollup(parent_id, rollup.as_values())
        logger.info(
            "Parent project rollup updated",
            parent_id=parent_id,
            child_count=rollup.child_count,
            status=rollup.status,
            progress=rollup.progress,
        )
        return rollup
