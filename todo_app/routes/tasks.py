"""CRUD endpoints for tasks.

Every handler answers with the ``{success, data, error}`` envelope.
Validation failures and unknown ids are explicit 400/404 paths; anything
else is logged and reported as a generic 500.
"""

import logging

from fastapi import APIRouter, Depends, Request

from todo_app.config import DATA_FILE
from todo_app.responses import (
    InvalidJSONBody,
    error_response,
    parse_json_body,
    success_response,
)
from todo_app.storage import TaskStorage
from todo_app.validation import validate_create_payload, validate_update_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

INVALID_JSON = "Invalid JSON in request body"
NOT_FOUND = "Task not found"

_storage = TaskStorage(DATA_FILE)


def get_storage() -> TaskStorage:
    """Return the task store for FastAPI dependency injection."""
    return _storage


@router.get("")
def list_tasks(storage: TaskStorage = Depends(get_storage)):
    """List all tasks, newest first."""
    try:
        return success_response(storage.get_all())
    except Exception:
        logger.exception("Error fetching tasks")
        return error_response("Failed to fetch tasks")


@router.post("")
async def create_task(request: Request, storage: TaskStorage = Depends(get_storage)):
    """Create a new task."""
    try:
        try:
            body = await parse_json_body(request)
        except InvalidJSONBody:
            return error_response(INVALID_JSON, 400)

        validation = validate_create_payload(body)
        if not validation.valid:
            return error_response(validation.error, 400)

        task = storage.create(validation.payload)
        return success_response(task, 201)
    except Exception:
        logger.exception("Error creating task")
        return error_response("Failed to create task")


@router.delete("")
def delete_all_tasks(storage: TaskStorage = Depends(get_storage)):
    """Delete every task."""
    try:
        storage.delete_all()
        return success_response(None)
    except Exception:
        logger.exception("Error deleting all tasks")
        return error_response("Failed to delete all tasks")


@router.get("/{task_id}")
def get_task(task_id: str, storage: TaskStorage = Depends(get_storage)):
    """Get a single task by ID."""
    try:
        task = storage.get_by_id(task_id)
        if task is None:
            return error_response(NOT_FOUND, 404)
        return success_response(task)
    except Exception:
        logger.exception("Error fetching task %s", task_id)
        return error_response("Failed to fetch task")


@router.patch("/{task_id}")
async def update_task(
    task_id: str, request: Request, storage: TaskStorage = Depends(get_storage)
):
    """Update an existing task. Only provided fields are changed."""
    try:
        try:
            body = await parse_json_body(request)
        except InvalidJSONBody:
            return error_response(INVALID_JSON, 400)

        validation = validate_update_payload(body)
        if not validation.valid:
            return error_response(validation.error, 400)

        task = storage.update(task_id, validation.payload)
        if task is None:
            return error_response(NOT_FOUND, 404)
        return success_response(task)
    except Exception:
        logger.exception("Error updating task %s", task_id)
        return error_response("Failed to update task")


@router.delete("/{task_id}")
def delete_task(task_id: str, storage: TaskStorage = Depends(get_storage)):
    """Delete a task by ID."""
    try:
        if not storage.delete(task_id):
            return error_response(NOT_FOUND, 404)
        return success_response(None)
    except Exception:
        logger.exception("Error deleting task %s", task_id)
        return error_response("Failed to delete task")
