"""Project service - CRUD, hierarchy rules and parent rollups."""

from typing import NamedTuple

from sqlalchemy.ext.asyncio import AsyncSession

from src.apex.core.exceptions import (
    ConcurrentUpdateError,
    ConflictError,
    ProjectNotFoundError,
    ValidationFailedError,
)
from src.apex.core.logging import get_logger
from src.apex.models import Project
from src.apex.models.base import utc_now
from src.apex.repositories import ProjectRepository
from src.apex.schemas.project import ProjectCreate, ProjectUpdate
from src.apex.services.project_metrics import (
    ProjectHealth,
    ProjectStats,
    is_overdue,
    project_health,
    project_stats,
    task_progress,
)
from src.apex.services.rollup import RollupService
from src.apex.services.time_entries import project_hours

logger = get_logger(__name__)


class HealthReport(NamedTuple):
    project_id: str
    health: ProjectHealth
    progress: int
    task_count: int
    overdue_tasks: int


class ProjectService:
    """Project operations.

    Any write to a child project recomputes its parent in the same
    transaction, and the whole unit is committed once.
    """

    def __init__(
        self,
        project_repo: ProjectRepository,
        session: AsyncSession,
        id_prefix: str = "",
        rollup_service: RollupService | None = None,
    ):
        self.project_repo = project_repo
        self.session = session
        self.id_prefix = id_prefix
        self.rollup_service = rollup_service or RollupService(project_repo)

    async def get_project(self, project_id: str) -> Project:
        project = await self.project_repo.get_by_id(project_id, refresh=True)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def list_projects(
        self,
        cursor: str | None = None,
        limit: int = 50,
        status: str | None = None,
        search: str | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        return await self.project_repo.list_all(
            cursor=cursor,
            limit=limit,
            id_prefix=self.id_prefix,
            status=status,
            search=search,
        )

    async def list_children(self, project_id: str) -> list[Project]:
        await self.get_project(project_id)
        return await self.project_repo.list_children(project_id)

    async def get_stats(self) -> ProjectStats:
        projects = await self.project_repo.list_for_stats(id_prefix=self.id_prefix)
        return project_stats(list(projects))

    async def get_health(self, project_id: str) -> HealthReport:
        project = await self.get_project(project_id)
        now = utc_now()
        roots = [task for task in project.tasks or [] if isinstance(task, dict)]
        return HealthReport(
            project_id=project.id,
            health=project_health(project, now),
            progress=task_progress(roots),
            task_count=len(roots),
            overdue_tasks=sum(1 for task in roots if is_overdue(task, now)),
        )

    async def _validate_parent(self, project_id: str, parent_id: str) -> None:
        """Keep the hierarchy one level deep and acyclic."""
        if parent_id == project_id:
            raise ValidationFailedError("A project cannot be its own parent")

        parent = await self.project_repo.get_by_id(parent_id)
        if parent is None:
            raise ProjectNotFoundError(parent_id)
        if parent.parent_project_id is not None:
            raise ConflictError(
                f"Project {parent_id} is a child of {parent.parent_project_id} "
                "and cannot have children of its own"
            )
        if await self.project_repo.count_children(project_id) > 0:
            raise ConflictError(
                f"Project {project_id} has child projects and cannot be attached to a parent"
            )

    async def _recompute(self, *parent_ids: str | None) -> None:
        seen: set[str] = set()
        for parent_id in parent_ids:
            if parent_id and parent_id not in seen:
                seen.add(parent_id)
                await self.rollup_service.recompute_parent(parent_id)

    async def create_project(self, data: ProjectCreate) -> Project:
        if await self.project_repo.get_by_id(data.id) is not None:
            raise ConflictError(f"Project {data.id} already exists")
        if data.parent_project_id:
            await self._validate_parent(data.id, data.parent_project_id)

        values = data.model_dump(exclude_none=True)
        values["status"] = data.status.value
        project = Project(**values)
        project.actual_hours = project_hours(project.tasks)
        self.project_repo.add(project)

        try:
            await self.session.flush()
            await self._recompute(project.parent_project_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project created",
            project_id=project.id,
            parent_project_id=project.parent_project_id,
        )
        return await self.get_project(project.id)

    async def update_project(self, project_id: str, data: ProjectUpdate) -> Project:
        project = await self.get_project(project_id)

        changes = data.model_dump(exclude_unset=True)
        expected_version = changes.pop("version", None)
        if expected_version is not None and expected_version != project.version:
            raise ConcurrentUpdateError(project_id)

        for required in ("name", "status"):
            if required in changes and changes[required] is None:
                del changes[required]
        if data.status is not None:
            changes["status"] = data.status.value

        old_parent = project.parent_project_id
        new_parent = changes.get("parent_project_id", old_parent)
        if new_parent and new_parent != old_parent:
            await self._validate_parent(project_id, new_parent)

        if not changes:
            return project

        try:
            if not await self.project_repo.compare_and_update(project, changes):
                raise ConcurrentUpdateError(project_id)
            await self._recompute(old_parent, new_parent)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project updated",
            project_id=project_id,
            fields=sorted(changes),
            parent_changed=new_parent != old_parent,
        )
        return await self.get_project(project_id)

    async def delete_project(self, project_id: str) -> Project:
        """Delete a project. Its children become top-level projects."""
        project = await self.get_project(project_id)
        parent_id = project.parent_project_id

        try:
            detached = await self.project_repo.detach_children(project_id)
            await self.project_repo.delete(project)
            await self.session.flush()
            await self._recompute(parent_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project deleted",
            project_id=project_id,
            parent_project_id=parent_id,
            detached_children=detached,
        )
        return project
