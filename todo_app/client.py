"""Async HTTP client for the task API.

Unwraps the ``{success, data, error}`` envelope and raises
:class:`ClientTransportError` on any failure. No retries.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from todo_app.errors import ClientTransportError, TaskNotFoundError
from todo_app.models import CreateTaskPayload, Task, UpdateTaskPayload

logger = logging.getLogger(__name__)

API_BASE = "/api/tasks"
DEFAULT_ERROR = "An unexpected error occurred"


class TaskApiClient:
    """Task API wrapper around :class:`httpx.AsyncClient`.

    Args:
        base_url: Root URL of the service.
        client: Optional preconfigured client. When omitted one is created
            and closed by :meth:`aclose`.
        transport: Optional httpx transport for the created client, e.g.
            ``httpx.ASGITransport(app=app)`` to talk to the app in-process.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -- operations -----------------------------------------------------------

    async def get_all(self) -> list[Task]:
        data = await self._request("GET", API_BASE)
        return [Task.model_validate(item) for item in data or []]

    async def get_by_id(self, task_id: str) -> Task:
        data = await self._request("GET", _task_url(task_id))
        if not data:
            raise TaskNotFoundError("Task not found", 404)
        return Task.model_validate(data)

    async def create(self, payload: CreateTaskPayload) -> Task:
        data = await self._request(
            "POST", API_BASE, payload.model_dump(mode="json", exclude_none=True)
        )
        if not data:
            raise ClientTransportError("Failed to create task")
        return Task.model_validate(data)

    async def update(self, task_id: str, payload: UpdateTaskPayload) -> Task:
        data = await self._request(
            "PATCH",
            _task_url(task_id),
            payload.model_dump(mode="json", exclude_unset=True, exclude_none=True),
        )
        if not data:
            raise ClientTransportError("Failed to update task")
        return Task.model_validate(data)

    async def delete(self, task_id: str) -> None:
        await self._request("DELETE", _task_url(task_id))

    async def delete_all(self) -> None:
        await self._request("DELETE", API_BASE)

    # -- private helpers ------------------------------------------------------

    async def _request(self, method: str, url: str, body: Any = None) -> Any:
        """Send a request and return the envelope's ``data``."""
        try:
            response = await self._client.request(method, url, json=body)
        except httpx.ConnectError as exc:
            logger.error("Connection error to task API: %s", exc)
            raise ClientTransportError("Service temporarily unavailable") from exc
        except httpx.TimeoutException as exc:
            logger.error("Request to task API timed out")
            raise ClientTransportError("Request timed out") from exc

        try:
            envelope = response.json()
        except ValueError:
            envelope = None

        if not isinstance(envelope, dict):
            raise ClientTransportError(DEFAULT_ERROR, response.status_code)

        if not response.is_success or not envelope.get("success"):
            message = envelope.get("error") or DEFAULT_ERROR
            if response.status_code == 404:
                raise TaskNotFoundError(message, 404)
            raise ClientTransportError(message, response.status_code)

        return envelope.get("data")


def _task_url(task_id: str) -> str:
    return f"{API_BASE}/{quote(task_id, safe='')}"
