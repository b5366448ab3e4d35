"""Pagination / search helpers shared by every listable resource."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from bff.core.responses import to_body

T = TypeVar("T")


class PaginationParams(BaseModel):
    page: int = 1
    limit: int = 20
    search: str | None = None
    role: str | None = None


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_pagination_params(
    query: Mapping[str, Any], default_limit: int = 20
) -> PaginationParams:
    """Read ``page`` (1-based), ``limit``, ``search`` and ``role``; bad numbers fall back to defaults."""
    search = (query.get("search") or "").strip() or None
    role = (query.get("role") or "").strip() or None
    return PaginationParams(
        page=_positive_int(query.get("page"), 1),
        limit=_positive_int(query.get("limit"), default_limit),
        search=search,
        role=role,
    )


def matches_search(search: str | None, *fields: str | None) -> bool:
    """Case-insensitive substring match over any of the display fields."""
    if not search:
        return True
    needle = search.lower()
    return any(needle in (value or "").lower() for value in fields)


def filter_by_search(
    items: Iterable[T], search: str | None, fields: Callable[[T], Sequence[str | None]]
) -> list[T]:
    return [item for item in items if matches_search(search, *fields(item))]


def apply_pagination(items: Sequence[T], page: int, limit: int) -> list[T]:
    start = (page - 1) * limit
    return list(items[start : start + limit])


def paginated_response(items: Sequence[Any], params: PaginationParams) -> dict:
    """Slice ``items`` for the requested page and wrap them in the list envelope."""
    total = len(items)
    return {
        "data": to_body(apply_pagination(items, params.page, params.limit)),
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "totalPages": math.ceil(total / params.limit) if params.limit else 0,
    }
