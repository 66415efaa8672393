"""
Pytest configuration and shared fixtures.

API tests run the whole application against a throwaway SQLite file.
Tests marked ``db`` talk to a real PostgreSQL database and only run with
RUN_DB_TESTS=1 and TEST_DATABASE_URL set.
"""

import os
from typing import Any, Dict, Iterable, List

import pytest
from fastapi.testclient import TestClient

from taskflow.core.config import Settings
from taskflow.main import create_app


# Default task data used by most API tests
DEFAULT_TASK: Dict[str, Any] = {
    "title": "Test Task",
    "description": "Test Description",
    "status": "Not Started",
    "priority": "Medium",
    "due_date": "2024-01-15",
}

STATUS_TEST_DATA = [
    {"status": "Not Started"},
    {"title": "In Progress Task", "status": "In Progress"},
    {"title": "Completed Task", "status": "Completed"},
]

PRIORITY_TEST_DATA = [
    {"priority": "Low"},
    {"title": "Medium Task", "priority": "Medium"},
    {"title": "High Task", "priority": "High"},
]

DATE_TEST_DATA = [
    {"due_date": "2024-01-15"},
    {"title": "Later Task", "due_date": "2024-03-15"},
    {"title": "Much Later Task", "due_date": "2024-06-15"},
]

SEARCH_TEST_DATA = [
    {"title": "JavaScript Project"},
    {"title": "Python Script", "description": "Write a JavaScript utility"},
    {"title": "Database Setup"},
]


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires a PostgreSQL database")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}",
        CREATE_TABLES=True,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(settings):
    """A TestClient with the app started (lifespan included) on a fresh database."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def create_task(client: TestClient, **overrides) -> Dict[str, Any]:
    """Create a task from DEFAULT_TASK plus ``overrides``; asserts 201."""
    response = client.post("/api/tasks", json={**DEFAULT_TASK, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def create_tasks(client: TestClient, tasks_data: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [create_task(client, **data) for data in tasks_data]
