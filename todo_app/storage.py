"""JSON file task store.

The whole collection is read into memory, changed, and written back on every
mutating call. There is no locking: with more than one writer process the
last write wins.
"""

import json
import logging
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as ModelValidationError

from todo_app.errors import StorageError, ValidationError
from todo_app.models import CreateTaskPayload, Task, TaskPriority, UpdateTaskPayload
from todo_app.text import is_blank

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _advance(previous: datetime) -> datetime:
    """Return now, or one microsecond past *previous* if the clock has not moved."""
    now = _now()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class TaskStorage:
    """Task CRUD over a single pretty-printed JSON array file.

    Parameters
    ----------
    data_file : Path
        Location of the JSON file. It and its parent directory are created
        holding an empty array on first access.
    """

    def __init__(self, data_file: Path) -> None:
        self._data_file = Path(data_file)

    @property
    def data_file(self) -> Path:
        return self._data_file

    # -- public API -----------------------------------------------------------

    def get_all(self) -> list[Task]:
        """Return every task, newest ``createdAt`` first.

        Ties keep the most recently appended record first.
        """
        tasks = self._read_tasks()
        return sorted(reversed(tasks), key=lambda t: t.created_at, reverse=True)

    def get_by_id(self, task_id: str) -> Optional[Task]:
        """Return the task with *task_id*, or None."""
        for task in self._read_tasks():
            if task.id == task_id:
                return task
        return None

    def create(self, payload: CreateTaskPayload) -> Task:
        """Create and persist a new task.

        Raises:
            ValidationError: If the title is blank after trimming.
        """
        title = payload.title.strip()
        if not title:
            raise ValidationError("Task title cannot be empty")

        tasks = self._read_tasks()
        now = _now()
        task = Task(
            id=str(uuid.uuid4()),
            title=title,
            completed=False,
            priority=payload.priority or TaskPriority.medium,
            created_at=now,
            updated_at=now,
        )
        self._write_tasks([*tasks, task])
        logger.debug("Created task %s", task.id)
        return task

    def update(self, task_id: str, payload: UpdateTaskPayload) -> Optional[Task]:
        """Apply the provided fields of *payload* to a task.

        Returns the updated task, or None if *task_id* does not exist.

        Raises:
            ValidationError: If a provided title is blank after trimming.
        """
        changes = payload.changes()
        if "title" in changes:
            if is_blank(changes["title"]):
                raise ValidationError("Task title cannot be empty")
            changes["title"] = changes["title"].strip()

        tasks = self._read_tasks()
        index = next((i for i, t in enumerate(tasks) if t.id == task_id), None)
        if index is None:
            return None

        existing = tasks[index]
        updated = Task.model_validate({
            **existing.model_dump(),
            **changes,
            "updated_at": _advance(max(existing.updated_at, existing.created_at)),
        })
        self._write_tasks([*tasks[:index], updated, *tasks[index + 1:]])
        logger.debug("Updated task %s fields=%s", task_id, sorted(changes))
        return updated

    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns True if it existed."""
        tasks = self._read_tasks()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._write_tasks(remaining)
        logger.debug("Deleted task %s", task_id)
        return True

    def delete_all(self) -> None:
        """Remove every task."""
        self._ensure_data_file()
        self._write_tasks([])
        logger.info("Deleted all tasks in %s", self._data_file)

    # -- private helpers ------------------------------------------------------

    def _ensure_data_file(self) -> None:
        """Create the data directory and an empty array file if missing."""
        if self._data_file.exists():
            return
        try:
            self._data_file.parent.mkdir(parents=True, exist_ok=True)
            self._data_file.write_text(json.dumps([], indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot initialise {self._data_file}: {exc}") from exc
        logger.info("Initialised empty task file %s", self._data_file)

    def _read_tasks(self) -> list[Task]:
        """Load the collection.

        Content that is not a JSON array reads as an empty collection;
        entries that are not valid tasks are skipped.
        """
        self._ensure_data_file()
        raw = self._data_file.read_bytes()
        try:
            parsed = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(
                "Task file %s is corrupted, reading as empty: %s",
                self._data_file, exc,
            )
            return []

        if not isinstance(parsed, list):
            logger.warning(
                "Task file %s does not hold an array, reading as empty",
                self._data_file,
            )
            return []

        tasks: list[Task] = []
        for entry in parsed:
            try:
                tasks.append(Task.model_validate(entry))
            except ModelValidationError as exc:
                logger.warning(
                    "Skipping malformed task record in %s: %s",
                    self._data_file, exc,
                )
        return tasks

    def _write_tasks(self, tasks: list[Task]) -> None:
        payload = json.dumps([t.to_json() for t in tasks], indent=2)
        try:
            self._data_file.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot write {self._data_file}: {exc}") from exc
