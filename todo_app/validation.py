"""Pure validation of create/update request bodies.

Each validator takes the decoded JSON body and returns a
:class:`ValidationResult` instead of raising, so handlers can map failures
straight to a 400 envelope.
"""

from dataclasses import dataclass
from typing import Any, Optional

from todo_app.config import MAX_TITLE_LENGTH
from todo_app.models import PRIORITY_VALUES, CreateTaskPayload, TaskPriority, UpdateTaskPayload
from todo_app.text import is_blank


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    payload: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, payload: Any) -> "ValidationResult":
        return cls(valid=True, payload=payload)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


def validate_title(title: Any) -> ValidationResult:
    """Check a title and return it trimmed.

    The length limit applies to the raw string, before trimming.
    """
    if not isinstance(title, str):
        return ValidationResult.fail("Title must be a string")
    if is_blank(title):
        return ValidationResult.fail("Title cannot be empty")
    if len(title) > MAX_TITLE_LENGTH:
        return ValidationResult.fail(
            f"Title must be {MAX_TITLE_LENGTH} characters or less"
        )
    return ValidationResult.ok(title.strip())


def validate_priority(priority: Any) -> ValidationResult:
    if not isinstance(priority, str) or priority not in PRIORITY_VALUES:
        return ValidationResult.fail(
            f"Priority must be one of: {', '.join(PRIORITY_VALUES)}"
        )
    return ValidationResult.ok(TaskPriority(priority))


def validate_create_payload(body: Any) -> ValidationResult:
    """Validate a create body: title required, priority optional."""
    if not isinstance(body, dict):
        return ValidationResult.fail("Request body must be an object")
    if "title" not in body:
        return ValidationResult.fail("Title is required")

    title = validate_title(body["title"])
    if not title.valid:
        return title

    fields: dict[str, Any] = {"title": title.payload}
    if "priority" in body:
        priority = validate_priority(body["priority"])
        if not priority.valid:
            return priority
        fields["priority"] = priority.payload

    return ValidationResult.ok(CreateTaskPayload(**fields))


def validate_update_payload(body: Any) -> ValidationResult:
    """Validate a partial update body.

    At least one of title, completed or priority must be present; each
    present field is checked on its own.
    """
    if not isinstance(body, dict):
        return ValidationResult.fail("Request body must be an object")

    if not any(key in body for key in ("title", "completed", "priority")):
        return ValidationResult.fail(
            "At least one field (title, completed or priority) must be provided"
        )

    fields: dict[str, Any] = {}

    if "title" in body:
        title = validate_title(body["title"])
        if not title.valid:
            return title
        fields["title"] = title.payload

    if "completed" in body:
        if not isinstance(body["completed"], bool):
            return ValidationResult.fail("Completed must be a boolean")
        fields["completed"] = body["completed"]

    if "priority" in body:
        priority = validate_priority(body["priority"])
        if not priority.valid:
            return priority
        fields["priority"] = priority.payload

    return ValidationResult.ok(UpdateTaskPayload(**fields))
