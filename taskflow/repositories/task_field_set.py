"""
Field-set resolution for task writes.

A ``TaskPatch`` carries only the fields a caller actually supplied. The
resolver turns it into ordered ``(column, placeholder)`` pairs once, and the
INSERT/UPDATE builders lay those pairs out; all parameter numbering happens
through a single ``ParamList``.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Tuple

from taskflow.repositories.sql_params import TASKS_TABLE, BuiltStatement, ParamList

# Column order of every generated statement
WRITABLE_FIELDS = ("title", "description", "due_date", "status", "priority")


class TaskPatch(Mapping):
    """
    Mapping of explicitly supplied task fields to their values.

    A key that is present means "write this", even when its value is None;
    a key that is absent means "leave the column alone" (or use the column
    default on insert).
    """

    def __init__(self, values: Mapping[str, Any]):
        unknown = sorted(set(values) - set(WRITABLE_FIELDS))
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(unknown)}")
        self._values: Dict[str, Any] = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"TaskPatch({self._values!r})"


def resolve_field_set(patch: TaskPatch, params: ParamList) -> List[Tuple[str, str]]:
    """Bind every supplied field, in column order, and return (column, placeholder) pairs."""
    return [
        (column, params.add(patch[column], column))
        for column in WRITABLE_FIELDS
        if column in patch
    ]


def build_insert(patch: TaskPatch) -> BuiltStatement:
    """
    Build ``INSERT ... RETURNING *`` for a new task.

    ``title`` must be supplied; every other column missing from the patch
    takes its database default.
    """
    if "title" not in patch:
        raise ValueError("title is required to create a task")

    params = ParamList()
    pairs = resolve_field_set(patch, params)
    columns = ", ".join(column for column, _ in pairs)
    placeholders = ", ".join(placeholder for _, placeholder in pairs)
    sql = (
        f"INSERT INTO {TASKS_TABLE} ({columns}) "
        f"VALUES ({placeholders}) "
        f"RETURNING *"
    )
    return BuiltStatement(sql=sql, params=params.snapshot())


def build_update(task_id: int, patch: TaskPatch) -> BuiltStatement:
    """
    Build ``UPDATE ... WHERE id = ... RETURNING *`` for an existing task.

    ``updated_at`` is refreshed on every update, so an empty patch is still
    a valid statement.
    """
    params = ParamList()
    assignments = [
        f"{column} = {placeholder}"
        for column, placeholder in resolve_field_set(patch, params)
    ]
    assignments.append("updated_at = CURRENT_TIMESTAMP")
    id_placeholder = params.add(task_id, "id")
    sql = (
        f"UPDATE {TASKS_TABLE} "
        f"SET {', '.join(assignments)} "
        f"WHERE id = {id_placeholder} "
        f"RETURNING *"
    )
    return BuiltStatement(sql=sql, params=params.snapshot())
