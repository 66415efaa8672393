"""
Task repository - database operations for Task.

Executes the statements produced by the query builder and the field-set
resolver. Every value is sent as a bound parameter typed after the column
it targets, so dates and integers reach the driver in their native form.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Integer, bindparam, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import TextClause

from taskflow.models.task import Task
from taskflow.repositories.sql_params import TASKS_TABLE, BuiltStatement, ParamList
from taskflow.repositories.task_field_set import TaskPatch, build_insert, build_update
from taskflow.repositories.task_query_builder import TaskQuery, build_task_list_query

_COLUMN_TYPES: Dict[str, Any] = {column.name: column.type for column in Task.__table__.c}


def _bind_type(column: Optional[str]) -> Any:
    if column is None:
        return Integer()
    return _COLUMN_TYPES[column]


def to_clause(statement: BuiltStatement, returns_rows: bool = False) -> TextClause:
    """Turn a built statement into a ``text()`` clause with typed bind parameters."""
    clause = text(statement.sql).bindparams(
        *[
            bindparam(param.name, param.value, type_=_bind_type(param.column))
            for param in statement.params
        ]
    )
    if returns_rows:
        # Typed result columns, matched by name
        clause = clause.columns(**_COLUMN_TYPES)
    return clause


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, query: TaskQuery) -> Tuple[List[RowMapping], int, int, int]:
        """
        Fetch one page of tasks.

        Returns:
            Tuple of (rows, total, page, limit) where page and limit are the
            clamped values actually used for the page query.
        """
        built = build_task_list_query(query)

        count_result = await self.db.execute(to_clause(built.count))
        total = int(count_result.scalar_one())

        result = await self.db.execute(to_clause(built.page, returns_rows=True))
        rows = list(result.mappings().all())
        return rows, total, built.page_number, built.limit

    async def get_by_id(self, task_id: int) -> Optional[RowMapping]:
        """Get a task by ID."""
        params = ParamList()
        statement = BuiltStatement(
            sql=f"SELECT * FROM {TASKS_TABLE} WHERE id = {params.add(task_id, 'id')}",
            params=params.snapshot(),
        )
        result = await self.db.execute(to_clause(statement, returns_rows=True))
        return result.mappings().one_or_none()

    async def create(self, patch: TaskPatch) -> RowMapping:
        """Insert a task and return the stored row, defaults included."""
        result = await self.db.execute(to_clause(build_insert(patch), returns_rows=True))
        return result.mappings().one()

    async def update(self, task_id: int, patch: TaskPatch) -> Optional[RowMapping]:
        """Apply a partial update; None when no task has ``task_id``."""
        result = await self.db.execute(
            to_clause(build_update(task_id, patch), returns_rows=True)
        )
        return result.mappings().one_or_none()

    async def delete(self, task_id: int) -> bool:
        """Delete a task; False when no task has ``task_id``."""
        params = ParamList()
        statement = BuiltStatement(
            sql=f"DELETE FROM {TASKS_TABLE} WHERE id = {params.add(task_id, 'id')} RETURNING id",
            params=params.snapshot(),
        )
        result = await self.db.execute(to_clause(statement))
        return result.scalar_one_or_none() is not None

    async def commit(self) -> None:
        await self.db.commit()
