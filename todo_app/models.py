"""Task model and transport payloads for the to-do API."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


PRIORITY_VALUES = tuple(p.value for p in TaskPriority)


class Task(BaseModel):
    """A persisted to-do record.

    Serialized with camelCase timestamp keys to match the on-disk and
    wire format. Records written before priorities existed load as medium.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.medium
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CreateTaskPayload(BaseModel):
    """Schema for creating a task. Title is required, priority defaults later."""
    title: str
    priority: Optional[TaskPriority] = None


class UpdateTaskPayload(BaseModel):
    """Schema for updating a task. Only explicitly set fields are applied."""
    title: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None

    def changes(self) -> dict[str, Any]:
        """Return the fields the caller actually provided.

        An explicit None is treated the same as leaving the field out.
        """
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }
