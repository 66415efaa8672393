import re
from datetime import date

import pytest

from taskflow.repositories.sql_params import ParamList
from taskflow.repositories.task_field_set import (
    TaskPatch,
    build_insert,
    build_update,
    resolve_field_set,
)
from taskflow.schemas.task import TaskCreate, TaskUpdate

pytestmark = pytest.mark.unit

PLACEHOLDER = re.compile(r":(p\d+)")


def test_insert_with_title_only():
    statement = build_insert(TaskPatch({"title": "Minimal Task"}))

    assert statement.sql == "INSERT INTO tasks (title) VALUES (:p1) RETURNING *"
    assert statement.values() == {"p1": "Minimal Task"}


def test_insert_keeps_column_order_regardless_of_payload_order():
    patch = TaskPatch(
        {
            "priority": "High",
            "status": "In Progress",
            "due_date": date(2024, 2, 1),
            "title": "Write report",
        }
    )
    statement = build_insert(patch)

    assert statement.sql == (
        "INSERT INTO tasks (title, due_date, status, priority) "
        "VALUES (:p1, :p2, :p3, :p4) RETURNING *"
    )
    assert [p.column for p in statement.params] == ["title", "due_date", "status", "priority"]
    assert [p.value for p in statement.params] == [
        "Write report",
        date(2024, 2, 1),
        "In Progress",
        "High",
    ]


def test_insert_requires_title():
    with pytest.raises(ValueError):
        build_insert(TaskPatch({"description": "no title"}))


def test_explicit_none_counts_as_supplied():
    statement = build_insert(TaskPatch({"title": "T", "description": None}))

    assert statement.sql == "INSERT INTO tasks (title, description) VALUES (:p1, :p2) RETURNING *"
    assert statement.values() == {"p1": "T", "p2": None}


def test_unknown_fields_are_rejected():
    with pytest.raises(ValueError):
        TaskPatch({"title": "T", "id": 5})


def test_update_sets_only_supplied_fields_and_refreshes_updated_at():
    statement = build_update(42, TaskPatch({"title": "X"}))

    assert statement.sql == (
        "UPDATE tasks SET title = :p1, updated_at = CURRENT_TIMESTAMP "
        "WHERE id = :p2 RETURNING *"
    )
    assert statement.values() == {"p1": "X", "p2": 42}


def test_empty_update_still_refreshes_updated_at():
    statement = build_update(7, TaskPatch({}))

    assert statement.sql == (
        "UPDATE tasks SET updated_at = CURRENT_TIMESTAMP WHERE id = :p1 RETURNING *"
    )
    assert statement.values() == {"p1": 7}


@pytest.mark.parametrize(
    "values",
    [
        {"title": "a"},
        {"status": "Completed", "description": "d"},
        {"priority": "Low", "due_date": None, "title": "t", "status": "In Progress", "description": ""},
    ],
)
def test_nth_placeholder_binds_nth_parameter(values):
    for statement in (build_insert(TaskPatch({"title": "t", **values})), build_update(1, TaskPatch(values))):
        names = PLACEHOLDER.findall(statement.sql)
        assert names == [p.name for p in statement.params]
        assert names == [f"p{i}" for i in range(1, len(names) + 1)]


def test_resolver_continues_an_existing_counter():
    params = ParamList()
    params.add("already bound")

    pairs = resolve_field_set(TaskPatch({"status": "Completed", "title": "t"}), params)

    assert pairs == [("title", ":p2"), ("status", ":p3")]
    assert len(params) == 3


def test_patch_from_schema_distinguishes_omitted_from_falsy():
    patch = TaskPatch(TaskUpdate(description="", due_date=None).model_dump(exclude_unset=True))

    assert dict(patch) == {"description": "", "due_date": None}


def test_create_schema_patch_leaves_defaults_to_the_store():
    patch = TaskPatch(TaskCreate(title="Minimal Task").model_dump(exclude_unset=True))

    assert dict(patch) == {"title": "Minimal Task"}
