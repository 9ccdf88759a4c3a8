"""Shared data access for APEX repositories.

Repositories only stage changes on the session; committing or rolling back
is the calling service's decision.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.apex.schemas.pagination import decode_cursor, encode_cursor

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def _pk(self) -> Any:
        return self.model.id  # type: ignore[attr-defined]

    async def get_by_id(self, id: Any) -> ModelType | None:
        return await self.session.scalar(select(self.model).where(self._pk == id))

    def add(self, entity: ModelType) -> None:
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Select,
        cursor: str | None,
        limit: int,
        order_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Keyset pagination, newest first.

        Rows are ordered by ``order_field`` (a timestamp column) with the
        primary key breaking ties, so rows sharing a timestamp are neither
        skipped nor repeated across pages. An unreadable cursor restarts from
        the first page.

        Returns:
            (items, next_cursor, has_more)
        """
        position = self._read_cursor(cursor)
        if position is not None:
            stamp, pk = position
            query = query.where(
                or_(order_field < stamp, and_(order_field == stamp, self._pk < pk))
            )

        query = query.order_by(order_field.desc(), self._pk.desc()).limit(limit + 1)
        rows = list((await self.session.scalars(query)).all())

        has_more = len(rows) > limit
        items = rows[:limit]
        next_cursor = None
        if has_more:
            last = items[-1]
            next_cursor = encode_cursor(getattr(last, order_field.key).isoformat(), last.id)
        return items, next_cursor, has_more

    def _read_cursor(self, cursor: str | None) -> tuple[datetime, Any] | None:
        if not cursor:
            return None
        try:
            stamp, raw_pk = decode_cursor(cursor)
            return datetime.fromisoformat(stamp), self._pk.type.python_type(raw_pk)
        except (ValueError, TypeError, NotImplementedError):
            return None
