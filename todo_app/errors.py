"""Exception types shared by the store, the HTTP layer and the client."""

from typing import Optional


class TodoError(Exception):
    """Base class for to-do application errors."""


class ValidationError(TodoError, ValueError):
    """Bad, missing or oversized input."""


class NotFoundError(TodoError, LookupError):
    """A task id that does not exist."""


class StorageError(TodoError):
    """The data file could not be written."""


class ClientTransportError(TodoError):
    """The API answered with a non-2xx status or a malformed envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TaskNotFoundError(ClientTransportError, NotFoundError):
    """The API reported 404 for a task id."""
