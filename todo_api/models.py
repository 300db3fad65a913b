# PURPOSE: request/response schemas (pydantic) for tasks, paging and registration.

from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

T = TypeVar("T")

# Fixed server-side page size; clients only choose the page index.
PAGE_SIZE = 10

# Task ids live in a 32-bit INTEGER column
MAX_TASK_ID = 2**31 - 1


class FieldError(BaseModel):
    """One field-level validation message."""

    field: str
    message: str


class TaskForm(BaseModel):
    title: str
    description: str

    def validate_fields(self) -> list[FieldError]:
        """Return field errors for empty values (empty list when the form is valid)."""
        errors: list[FieldError] = []
        if not self.title.strip():
            errors.append(FieldError(field="title", message="Title is required"))
        if not self.description.strip():
            errors.append(FieldError(field="description", message="Description is required"))
        return errors


class CreateTaskForm(TaskForm):
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {"title": "Laundry", "description": "Do the laundry"},
            ]
        },
    )


class UpdateTaskForm(TaskForm):
    completed: bool
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {"title": "Laundry", "description": "Do the laundry", "completed": True},
            ]
        },
    )


class TaskSummary(BaseModel):
    id: int
    title: str
    description: str
    completed: bool
    date_created: datetime
    date_modified: datetime | None = None

    model_config = ConfigDict(from_attributes=True)  # ORM -> schema

    @field_validator("date_created", "date_modified")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite drops the offset on read; every stored timestamp is UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Task(TaskSummary):
    """Detail view of a single task."""


class PagedResult(BaseModel, Generic[T]):
    # Items retrieved for the requested page
    items: list[T]
    page_index: int
    page_size: int
    # Total number of rows matching the filter, not just this page
    total_count: int


class CreateTaskResult(BaseModel):
    id: int


# --- User / registration schemas ---


class UserRegistration(BaseModel):
    email_address: EmailStr
    model_config = ConfigDict(
        json_schema_extra={"examples": [{"email_address": "jane@example.com"}]}
    )


class RegistrationResult(BaseModel):
    # Plaintext API key: returned once, never stored
    api_key: str
