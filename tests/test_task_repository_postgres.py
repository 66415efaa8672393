"""
Task repository tests against a real PostgreSQL database.

Run with RUN_DB_TESTS=1 and TEST_DATABASE_URL pointing at a scratch
database (postgresql+asyncpg://...). The tasks table is created if missing
and emptied before each test.
"""

import os
from datetime import date

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from taskflow.core.config import Settings
from taskflow.db.session import build_engine, build_session_maker, create_tables
from taskflow.repositories.task_field_set import TaskPatch
from taskflow.repositories.task_query_builder import TaskQuery
from taskflow.repositories.task_repository import TaskRepository


async def _session_maker():
    url = os.environ.get("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL is not set")
    engine = build_engine(Settings(DATABASE_URL=url))
    await create_tables(engine)
    async with engine.begin() as conn:
        await conn.execute(text("DELETE FROM tasks"))
    return engine, build_session_maker(engine)


@pytest.mark.db
@pytest.mark.asyncio
async def test_create_filter_and_page():
    engine, session_maker = await _session_maker()
    try:
        async with session_maker() as db:
            repository = TaskRepository(db)
            for i, status in enumerate(["Not Started", "In Progress", "Completed"]):
                await repository.create(
                    TaskPatch({"title": f"Task {i}", "status": status, "due_date": date(2024, i + 1, 15)})
                )
            await db.commit()

            rows, total, page, limit = await repository.list(
                TaskQuery(status="In Progress", start_date="2024-02-01", end_date="2024-02-28")
            )
            assert total == 1
            assert (page, limit) == (1, 10)
            assert rows[0]["title"] == "Task 1"
            assert rows[0]["due_date"] == date(2024, 2, 15)

            rows, total, _, _ = await repository.list(TaskQuery(sort_by="due_date", sort_order="desc", limit="2"))
            assert total == 3
            assert [row["title"] for row in rows] == ["Task 2", "Task 1"]
    finally:
        await engine.dispose()


@pytest.mark.db
@pytest.mark.asyncio
async def test_check_constraint_rejects_unknown_status():
    engine, session_maker = await _session_maker()
    try:
        async with session_maker() as db:
            repository = TaskRepository(db)
            with pytest.raises(IntegrityError):
                await repository.create(TaskPatch({"title": "Bad", "status": "InvalidStatus"}))
            await db.rollback()

            rows, total, _, _ = await repository.list(TaskQuery())
            assert total == 0
    finally:
        await engine.dispose()


@pytest.mark.db
@pytest.mark.asyncio
async def test_partial_update_and_delete():
    engine, session_maker = await _session_maker()
    try:
        async with session_maker() as db:
            repository = TaskRepository(db)
            created = await repository.create(
                TaskPatch({"title": "Original", "description": "keep me", "priority": "High"})
            )
            await db.commit()

            updated = await repository.update(created["id"], TaskPatch({"title": "Renamed"}))
            await db.commit()
            assert updated["title"] == "Renamed"
            assert updated["description"] == "keep me"
            assert updated["priority"] == "High"
            assert updated["updated_at"] >= created["created_at"]

            assert await repository.update(999999, TaskPatch({"title": "nope"})) is None
            assert await repository.delete(created["id"]) is True
            assert await repository.delete(created["id"]) is False
            await db.commit()
    finally:
        await engine.dispose()

