"""Pagination schemas: cursor-based lists and offset-based pages with totals."""

import base64
import json
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Cursor-paginated list.

    The cursor is opaque; clients pass it back to get the next page.
    """

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for fetching the next page. None if no more pages.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether there are more items after this page.",
    )


class OffsetPage(BaseModel, Generic[T]):
    """Offset-paginated list with the total number of matching rows."""

    items: list[T]
    total: int
    limit: int
    offset: int


def encode_cursor(stamp: str, key: object) -> str:
    """Opaque cursor for the row at (stamp, key) in a newest-first listing."""
    payload = json.dumps([stamp, str(key)], separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode()).decode()


def decode_cursor(cursor: str) -> tuple[str, str]:
    """Inverse of encode_cursor.

    Raises:
        ValueError: If the cursor was not produced by encode_cursor
    """
    try:
        stamp, key = json.loads(base64.urlsafe_b64decode(cursor.encode()))
    except (ValueError, TypeError) as e:
        raise ValueError("Invalid cursor") from e
    if not isinstance(stamp, str) or not isinstance(key, str):
        raise ValueError("Invalid cursor")
    return stamp, key
