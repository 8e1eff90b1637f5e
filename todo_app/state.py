"""Client-side task state with optimistic updates.

Holds the ``{tasks, loading, error}`` state a UI renders from. Every
mutation is applied locally first, then confirmed against the API: on
success the local record is replaced with the server's version, on failure
the state captured before the change is put back and the error re-raised.

State transitions are pure functions over the state dict; ``self._state``
is replaced, never mutated in place.
"""

import asyncio
import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from todo_app.client import TaskApiClient
from todo_app.models import CreateTaskPayload, Task, TaskPriority, UpdateTaskPayload

logger = logging.getLogger(__name__)

TEMP_ID_PREFIX = "temp-"


def _initial_state() -> dict:
    """Return a fresh state dict; loading until the first fetch settles."""
    return {
        "tasks": [],
        "loading": True,
        "error": None,
    }


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _error_message(exc: BaseException, fallback: str) -> str:
    return str(exc) or fallback


# -- transitions ---------------------------------------------------------------


def set_tasks(state: dict, tasks: list[Task]) -> dict:
    return {**state, "tasks": list(tasks)}


def set_loading(state: dict, loading: bool) -> dict:
    return {**state, "loading": loading}


def set_error(state: dict, error: Optional[str]) -> dict:
    return {**state, "error": error}


def prepend_task(state: dict, task: Task) -> dict:
    return {**state, "tasks": [task, *state["tasks"]]}


def replace_task(state: dict, task_id: str, task: Task) -> dict:
    """Swap the record with *task_id* for *task*, keeping its position."""
    return {
        **state,
        "tasks": [task if t.id == task_id else t for t in state["tasks"]],
    }


def patch_task(state: dict, task_id: str, changes: dict[str, Any]) -> dict:
    """Apply *changes* to the record with *task_id*; other fields are kept."""
    return {
        **state,
        "tasks": [
            t.model_copy(update=changes) if t.id == task_id else t
            for t in state["tasks"]
        ],
    }


def remove_task(state: dict, task_id: str) -> dict:
    return {**state, "tasks": [t for t in state["tasks"] if t.id != task_id]}


def insert_task(state: dict, index: int, task: Task) -> dict:
    tasks = state["tasks"]
    return {**state, "tasks": [*tasks[:index], task, *tasks[index:]]}


# -- views ---------------------------------------------------------------------


def display_order(tasks: list[Task]) -> list[Task]:
    """Incomplete tasks before completed ones, otherwise in the given order."""
    return sorted(tasks, key=lambda t: t.completed)


def task_stats(tasks: list[Task]) -> dict:
    completed = sum(1 for t in tasks if t.completed)
    return {
        "pending": len(tasks) - completed,
        "completed": completed,
        "total": len(tasks),
    }


class TaskState:
    """Per-UI-root task state container.

    Call :meth:`start` once to fetch the collection and :meth:`close` on
    teardown; a fetch still in flight at that point is cancelled and its
    result discarded.

    Args:
        api: Client used to confirm every mutation against the server.
    """

    def __init__(self, api: TaskApiClient) -> None:
        self._api = api
        self._state: dict = _initial_state()
        self._load_task: Optional[asyncio.Task] = None
        self._closed = False

    # -- reads ---------------------------------------------------------------

    def snapshot(self) -> dict:
        """Return a deep copy of the current state."""
        return copy.deepcopy(self._state)

    @property
    def tasks(self) -> list[Task]:
        return copy.deepcopy(self._state["tasks"])

    @property
    def loading(self) -> bool:
        return self._state["loading"]

    @property
    def error(self) -> Optional[str]:
        return self._state["error"]

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> asyncio.Task:
        """Schedule the initial fetch. Must be called from a running loop."""
        if self._load_task is None:
            self._load_task = asyncio.create_task(self.load())
        return self._load_task

    async def load(self) -> None:
        """Fetch the full collection, unless the container has been closed."""
        if self._closed:
            return
        self._state = set_loading(set_error(self._state, None), True)
        try:
            tasks = await self._api.get_all()
        except Exception as exc:
            if not self._closed:
                logger.warning("Initial task fetch failed: %s", exc)
                self._state = set_error(
                    self._state, _error_message(exc, "Failed to fetch tasks")
                )
        else:
            if not self._closed:
                self._state = set_tasks(self._state, tasks)
        finally:
            if not self._closed:
                self._state = set_loading(self._state, False)

    def close(self) -> None:
        """Tear down: cancel the initial fetch and ignore its late result."""
        self._closed = True
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()

    # -- mutations -----------------------------------------------------------

    async def create_task(self, payload: CreateTaskPayload) -> Task:
        """Show a placeholder at the top, then swap in the server's record."""
        self._state = set_error(self._state, None)

        temp_id = f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"
        now = _now()
        placeholder = Task(
            id=temp_id,
            title=payload.title,
            completed=False,
            priority=payload.priority or TaskPriority.medium,
            created_at=now,
            updated_at=now,
        )
        self._state = prepend_task(self._state, placeholder)

        try:
            created = await self._api.create(payload)
        except Exception as exc:
            self._state = remove_task(self._state, temp_id)
            self._fail(exc, "Failed to create task")
            raise

        self._state = replace_task(self._state, temp_id, created)
        return created

    async def update_task(
        self, task_id: str, payload: UpdateTaskPayload
    ) -> Optional[Task]:
        """Apply the provided fields locally, then confirm with the server.

        Does nothing and returns None if *task_id* is not in local state.
        """
        self._state = set_error(self._state, None)

        previous = next((t for t in self._state["tasks"] if t.id == task_id), None)
        if previous is None:
            return None

        self._state = patch_task(self._state, task_id, payload.changes())

        try:
            updated = await self._api.update(task_id, payload)
        except Exception as exc:
            self._state = replace_task(self._state, task_id, previous)
            self._fail(exc, "Failed to update task")
            raise

        self._state = replace_task(self._state, task_id, updated)
        return updated

    async def toggle_task(self, task_id: str, current_completed: bool) -> Optional[Task]:
        return await self.update_task(
            task_id, UpdateTaskPayload(completed=not current_completed)
        )

    async def delete_task(self, task_id: str) -> None:
        """Remove locally; on failure put the task back at the same index.

        Does nothing if *task_id* is not in local state.
        """
        self._state = set_error(self._state, None)

        tasks = self._state["tasks"]
        index = next((i for i, t in enumerate(tasks) if t.id == task_id), None)
        if index is None:
            return
        deleted = tasks[index]

        self._state = remove_task(self._state, task_id)

        try:
            await self._api.delete(task_id)
        except Exception as exc:
            self._state = insert_task(self._state, index, deleted)
            self._fail(exc, "Failed to delete task")
            raise

    async def delete_all_tasks(self) -> None:
        """Clear locally; on failure restore the whole previous collection."""
        self._state = set_error(self._state, None)

        previous = self._state["tasks"]
        self._state = set_tasks(self._state, [])

        try:
            await self._api.delete_all()
        except Exception as exc:
            self._state = set_tasks(self._state, previous)
            self._fail(exc, "Failed to delete all tasks")
            raise

    def clear_error(self) -> None:
        self._state = set_error(self._state, None)

    # -- private helpers -----------------------------------------------------

    def _fail(self, exc: BaseException, fallback: str) -> None:
        message = _error_message(exc, fallback)
        logger.warning("%s, rolled back: %s", fallback, message)
        self._state = set_error(self._state, message)
