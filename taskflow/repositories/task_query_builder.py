"""
Task list query construction.

Builds the count query and the page query for ``GET /api/tasks`` from the
optional request parameters. Both statements share one WHERE clause and one
parameter list; nothing from the request is ever interpolated into the SQL
text except column names taken from the sort allow-list.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union

from taskflow.repositories.sql_params import TASKS_TABLE, BuiltStatement, ParamList

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

SORTABLE_COLUMNS = ("due_date", "priority", "status", "created_at")
SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_ORDER_BY = "ORDER BY created_at DESC, id DESC"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LIKE_SPECIAL = re.compile(r"([\\%_])")
_DATE_PREFIX = re.compile(r"^(\d{1,4})-(\d{1,2})-(\d{1,2})([T ].*)?$")


@dataclass(frozen=True)
class TaskQuery:
    """Raw listing parameters as they arrive on the query string."""

    search: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: Union[str, int, None] = None
    limit: Union[str, int, None] = None


@dataclass(frozen=True)
class TaskListQuery:
    """The pair of statements needed to serve one page of tasks."""

    count: BuiltStatement
    page: BuiltStatement
    page_number: int
    limit: int


def _leading_int(value: Union[str, int, None]) -> Optional[int]:
    """Read the integer prefix of ``value`` ("12abc" -> 12), or None."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def resolve_page(value: Union[str, int, None]) -> int:
    page = _leading_int(value)
    if page is None or page < 1:
        return DEFAULT_PAGE
    return page


def resolve_limit(value: Union[str, int, None]) -> int:
    """
    Clamp the page size to 1..100.

    Zero, negative and non-numeric values take the default of 10 rather
    than the lower bound of 1.
    """
    limit = _leading_int(value)
    if limit is None or limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def resolve_order_by(sort_by: Optional[str], sort_order: Optional[str]) -> str:
    """
    Pick the ORDER BY clause.

    Only allow-listed columns are sortable. The direction defaults to ASC for
    a valid column; anything unrecognised falls back to newest first. ``id``
    breaks ties in the same direction so pages never overlap.
    """
    if sort_by not in SORTABLE_COLUMNS:
        return DEFAULT_ORDER_BY

    direction = (sort_order or "").lower()
    if direction not in SORT_DIRECTIONS:
        direction = "asc"
    direction = direction.upper()
    return f"ORDER BY {sort_by} {direction}, id {direction}"


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


def _like_pattern(term: str) -> str:
    escaped = _LIKE_SPECIAL.sub(r"\\\1", term.lower())
    return f"%{escaped}%"


def _parse_date(value: str) -> date:
    """
    Read a date filter the way the database would cast it to DATE.

    Accepts unpadded parts ("2024-3-1") and a trailing ISO time, optionally
    zoned ("2024-03-01T00:00:00Z"); the time part is validated and dropped.
    Raises ValueError for anything else.
    """
    match = _DATE_PREFIX.match(value.strip())
    if not match:
        raise ValueError(f"Invalid date filter: {value!r}")
    year, month, day, rest = match.groups()
    parsed = date(int(year), int(month), int(day))
    if rest:
        if rest[-1] in "Zz":
            rest = rest[:-1] + "+00:00"
        datetime.fromisoformat(parsed.isoformat() + rest)
    return parsed


def build_where_clause(query: TaskQuery, params: ParamList) -> str:
    """
    Build the conjunctive WHERE clause for the filters that are present.

    Missing and empty-string filters add no predicate. Returns an empty
    string when nothing filters the table.
    """
    conditions: List[str] = []

    if query.search:
        placeholder = params.add(_like_pattern(query.search), "title")
        conditions.append(
            f"(lower(title) LIKE {placeholder} ESCAPE '\\' "
            f"OR lower(description) LIKE {placeholder} ESCAPE '\\')"
        )

    if query.status:
        conditions.append(f"status = {params.add(query.status, 'status')}")

    if query.priority:
        conditions.append(f"priority = {params.add(query.priority, 'priority')}")

    if query.start_date:
        start = _parse_date(query.start_date)
        conditions.append(f"due_date >= {params.add(start, 'due_date')}")

    if query.end_date:
        end = _parse_date(query.end_date)
        conditions.append(f"due_date <= {params.add(end, 'due_date')}")

    if not conditions:
        return ""
    return "WHERE " + " AND ".join(conditions)


def build_task_list_query(query: TaskQuery) -> TaskListQuery:
    """Translate listing parameters into the count and page statements."""
    page_number = resolve_page(query.page)
    limit = resolve_limit(query.limit)

    params = ParamList()
    where = build_where_clause(query, params)

    count_sql = f"SELECT COUNT(*) FROM {TASKS_TABLE}"
    page_sql = f"SELECT * FROM {TASKS_TABLE}"
    if where:
        count_sql = f"{count_sql} {where}"
        page_sql = f"{page_sql} {where}"
    count = BuiltStatement(sql=count_sql, params=params.snapshot())

    page_sql = f"{page_sql} {resolve_order_by(query.sort_by, query.sort_order)}"
    limit_placeholder = params.add(limit)
    offset_placeholder = params.add((page_number - 1) * limit)
    page_sql = f"{page_sql} LIMIT {limit_placeholder} OFFSET {offset_placeholder}"

    return TaskListQuery(
        count=count,
        page=BuiltStatement(sql=page_sql, params=params.snapshot()),
        page_number=page_number,
        limit=limit,
    )
