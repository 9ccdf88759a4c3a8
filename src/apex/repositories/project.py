"""Repository for Project entity."""

from collections.abc import Sequence
from typing import Any, cast

from sqlalchemy import func, or_, update
from sqlalchemy.engine import CursorResult
from sqlmodel import select

from src.apex.models import Project
from src.apex.models.base import utc_now
from src.apex.repositories.base import BaseRepository


def _id_starts_with(prefix: str) -> Any:
    return Project.id.startswith(prefix, autoescape=True)  # type: ignore[attr-defined]


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def get_by_id(self, id: Any, *, refresh: bool = False) -> Project | None:
        """Get a project by id.

        With refresh=True the row is re-read even if the session already
        holds the object, so a retry sees the latest committed version.
        """
        query = select(Project).where(Project.id == id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_all(
        self,
        cursor: str | None = None,
        limit: int = 50,
        id_prefix: str = "",
        status: str | None = None,
        search: str | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        """List projects newest first with cursor pagination."""
        query = select(Project)
        if id_prefix:
            query = query.where(_id_starts_with(id_prefix))
        if status:
            query = query.where(Project.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Project.name.ilike(pattern),  # type: ignore[attr-defined]
                    Project.client.ilike(pattern),  # type: ignore[union-attr]
                )
            )
        return await self.paginate(query, cursor, limit, Project.created_at)

    async def list_for_stats(self, id_prefix: str = "") -> Sequence[Project]:
        query = select(Project)
        if id_prefix:
            query = query.where(_id_starts_with(id_prefix))
        result = await self.session.execute(query)
        return result.scalars().all()

    async def list_children(self, parent_id: str) -> list[Project]:
        """Direct children of a project, newest first."""
        result = await self.session.execute(
            select(Project)
            .where(Project.parent_project_id == parent_id)
            .order_by(Project.created_at.desc(), Project.id)  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def count_children(self, parent_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Project).where(Project.parent_project_id == parent_id)
        )
        return int(result.scalar_one())

    async def compare_and_update(self, project: Project, values: dict[str, Any]) -> bool:
        """Write values only if the row still has the version we read.

        Bumps the version and updated_at. Returns False when another writer
        got there first; nothing is written in that case.
        """
        stmt = (
            update(Project)
            .where(Project.id == project.id, Project.version == project.version)
            .values(**values, version=Project.version + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return cast(CursorResult[Any], result).rowcount == 1

    async def apply_rollup(self, parent_id: str, values: dict[str, Any]) -> None:
        """Overwrite a parent's aggregate fields unconditionally."""
        await self.session.execute(
            update(Project)
            .where(Project.id == parent_id)
            .values(**values, version=Project.version + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )

    async def detach_children(self, parent_id: str) -> int:
        """Clear the parent reference of every child. Returns rows changed."""
        result = await self.session.execute(
            update(Project)
            .where(Project.parent_project_id == parent_id)
            .values(parent_project_id=None, version=Project.version + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult[Any], result).rowcount
