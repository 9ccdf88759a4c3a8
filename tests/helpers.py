"""In-memory repository used by service and API tests.

Rows are stored as plain dicts and every read returns a fresh Project, so a
service holding a stale object behaves as it would against the database.
"""

from copy import deepcopy
from typing import Any

from src.apex.models import Project
from src.apex.models.base import utc_now


class InMemoryProjectRepository:
    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Any]] = {}
        self.fail_next_writes = 0
        self.write_attempts = 0

    def _load(self, row: dict[str, Any]) -> Project:
        return Project(**deepcopy(row))

    def seed(self, *projects: Project) -> None:
        for project in projects:
            self.add(project)

    def row(self, project_id: str) -> dict[str, Any]:
        return self.rows[project_id]

    def add(self, project: Project) -> None:
        self.rows[project.id] = deepcopy(project.model_dump())

    async def delete(self, project: Project) -> None:
        self.rows.pop(project.id, None)

    async def get_by_id(self, id: Any, *, refresh: bool = False) -> Project | None:
        row = self.rows.get(id)
        return self._load(row) if row is not None else None

    async def list_all(
        self,
        cursor: str | None = None,
        limit: int = 50,
        id_prefix: str = "",
        status: str | None = None,
        search: str | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        rows = [
            row
            for row in self.rows.values()
            if row["id"].startswith(id_prefix) and (status is None or row["status"] == status)
        ]
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return [self._load(row) for row in rows[:limit]], None, len(rows) > limit

    async def list_for_stats(self, id_prefix: str = "") -> list[Project]:
        return [self._load(r) for r in self.rows.values() if r["id"].startswith(id_prefix)]

    async def list_children(self, parent_id: str) -> list[Project]:
        rows = [row for row in self.rows.values() if row["parent_project_id"] == parent_id]
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return [self._load(row) for row in rows]

    async def count_children(self, parent_id: str) -> int:
        return len(await self.list_children(parent_id))

    def _write(self, project_id: str, values: dict[str, Any]) -> None:
        row = self.rows[project_id]
        row.update(deepcopy(values))
        row["version"] += 1
        row["updated_at"] = utc_now()

    async def compare_and_update(self, project: Project, values: dict[str, Any]) -> bool:
        self.write_attempts += 1
        row = self.rows.get(project.id)
        if row is None or row["version"] != project.version:
            return False
        if self.fail_next_writes:
            # Another writer commits first
            self.fail_next_writes -= 1
            row["version"] += 1
            return False
        self._write(project.id, values)
        return True

    async def apply_rollup(self, parent_id: str, values: dict[str, Any]) -> None:
        if parent_id in self.rows:
            self._write(parent_id, values)

    async def detach_children(self, parent_id: str) -> int:
        children = [r for r in self.rows.values() if r["parent_project_id"] == parent_id]
        for row in children:
            self._write(row["id"], {"parent_project_id": None})
        return len(children)
