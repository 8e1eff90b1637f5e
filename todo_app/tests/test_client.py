"""Tests for the async task API client."""

import json

import httpx
import pytest

from todo_app.client import DEFAULT_ERROR, TaskApiClient
from todo_app.errors import ClientTransportError, NotFoundError, TaskNotFoundError
from todo_app.main import app
from todo_app.models import CreateTaskPayload, TaskPriority, UpdateTaskPayload


def _asgi_client() -> TaskApiClient:
    """Client that talks to the FastAPI app in-process."""
    return TaskApiClient(
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=app),
    )


def _mock_client(handler) -> TaskApiClient:
    return TaskApiClient(
        base_url="http://testserver",
        transport=httpx.MockTransport(handler),
    )


class TestAgainstApp:
    """Round trips through the real routes with a temporary task file."""

    @pytest.mark.anyio()
    async def test_crud_flow(self, override_storage):
        async with _asgi_client() as api:
            assert await api.get_all() == []

            created = await api.create(
                CreateTaskPayload(title="  Water plants ", priority=TaskPriority.low)
            )
            assert created.title == "Water plants"
            assert created.priority == TaskPriority.low

            fetched = await api.get_by_id(created.id)
            assert fetched == created

            updated = await api.update(created.id, UpdateTaskPayload(completed=True))
            assert updated.completed is True
            assert updated.title == "Water plants"

            await api.delete(created.id)
            assert await api.get_all() == []

    @pytest.mark.anyio()
    async def test_delete_all(self, override_storage):
        async with _asgi_client() as api:
            await api.create(CreateTaskPayload(title="One"))
            await api.create(CreateTaskPayload(title="Two"))
            await api.delete_all()
            assert await api.get_all() == []

    @pytest.mark.anyio()
    async def test_missing_task_raises_not_found(self, override_storage):
        async with _asgi_client() as api:
            with pytest.raises(TaskNotFoundError) as exc_info:
                await api.get_by_id("nope")
        assert str(exc_info.value) == "Task not found"
        assert exc_info.value.status_code == 404
        assert isinstance(exc_info.value, NotFoundError)
        assert isinstance(exc_info.value, ClientTransportError)

    @pytest.mark.anyio()
    async def test_validation_message_surfaces(self, override_storage):
        async with _asgi_client() as api:
            with pytest.raises(ClientTransportError, match="Title cannot be empty") as exc_info:
                await api.create(CreateTaskPayload(title="   "))
        assert exc_info.value.status_code == 400


class TestEnvelopeHandling:
    @pytest.mark.anyio()
    async def test_sends_only_provided_fields(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            task = {
                "id": "abc",
                "title": "Buy milk",
                "completed": True,
                "priority": "medium",
                "createdAt": "2024-01-01T00:00:00Z",
                "updatedAt": "2024-01-02T00:00:00Z",
            }
            return httpx.Response(200, json={"success": True, "data": task})

        async with _mock_client(handler) as api:
            await api.create(CreateTaskPayload(title="Buy milk"))
            await api.update("abc", UpdateTaskPayload(completed=True))

        create_req, update_req = seen
        assert create_req.method == "POST"
        assert create_req.url.path == "/api/tasks"
        assert json.loads(create_req.content) == {"title": "Buy milk"}
        assert create_req.headers["content-type"] == "application/json"
        assert update_req.method == "PATCH"
        assert update_req.url.path == "/api/tasks/abc"
        assert json.loads(update_req.content) == {"completed": True}

    @pytest.mark.anyio()
    async def test_non_json_error_uses_fallback(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        async with _mock_client(handler) as api:
            with pytest.raises(ClientTransportError) as exc_info:
                await api.get_all()
        assert str(exc_info.value) == DEFAULT_ERROR
        assert exc_info.value.status_code == 502

    @pytest.mark.anyio()
    async def test_unsuccessful_envelope_without_message(self):
        def handler(request):
            return httpx.Response(200, json={"success": False})

        async with _mock_client(handler) as api:
            with pytest.raises(ClientTransportError, match=DEFAULT_ERROR):
                await api.delete_all()

    @pytest.mark.anyio()
    async def test_server_message_on_error_status(self):
        def handler(request):
            return httpx.Response(500, json={"success": False, "error": "Failed to delete task"})

        async with _mock_client(handler) as api:
            with pytest.raises(ClientTransportError, match="Failed to delete task"):
                await api.delete("abc")

    @pytest.mark.anyio()
    async def test_create_without_data_fails(self):
        def handler(request):
            return httpx.Response(201, json={"success": True, "data": None})

        async with _mock_client(handler) as api:
            with pytest.raises(ClientTransportError, match="Failed to create task"):
                await api.create(CreateTaskPayload(title="x"))

    @pytest.mark.anyio()
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _mock_client(handler) as api:
            with pytest.raises(ClientTransportError, match="Service temporarily unavailable"):
                await api.get_all()
