"""Shared fixtures: a throwaway task file and an app wired to it."""

import pytest
from fastapi.testclient import TestClient

from todo_app.main import app
from todo_app.routes.tasks import get_storage
from todo_app.storage import TaskStorage


@pytest.fixture(name="storage")
def storage_fixture(tmp_path):
    """Create a store backed by a not-yet-existing file for each test."""
    return TaskStorage(tmp_path / "data" / "tasks.json")


@pytest.fixture(name="override_storage")
def override_storage_fixture(storage: TaskStorage):
    """Point the app's storage dependency at the test store."""
    app.dependency_overrides[get_storage] = lambda: storage
    yield storage
    app.dependency_overrides.clear()


@pytest.fixture(name="client")
def client_fixture(override_storage: TaskStorage):
    """Create a test client with overridden storage."""
    return TestClient(app)


@pytest.fixture(name="anyio_backend")
def anyio_backend_fixture():
    """Run async tests on asyncio, the only event loop the client supports."""
    return "asyncio"
