from fastapi import Path, Query

from ..models import MAX_TASK_ID, PAGE_SIZE, FieldError
from .errors import TaskNotFound, ValidationFailed

# OFFSET is a signed 64-bit value in the database
MAX_PAGE = (2**63 - 1) // PAGE_SIZE


def parse_page(page: str | None = Query(None)) -> int:
    """Page index from the query string: defaults to 0, must be an integer in 0..MAX_PAGE."""
    if page is None or page == "":
        return 0
    try:
        value = int(page)
    except (TypeError, ValueError) as err:
        raise ValidationFailed(
            [FieldError(field="page", message="Page must be a whole number")]
        ) from err
    if value < 0:
        raise ValidationFailed(
            [FieldError(field="page", message="Page must be greater than or equal to 0")]
        )
    if value > MAX_PAGE:
        raise ValidationFailed(
            [FieldError(field="page", message=f"Page must be less than or equal to {MAX_PAGE}")]
        )
    return value


def parse_task_id(task_id: int = Path()) -> int:
    """Task id from the path; ids outside the integer column range can't exist."""
    if not 1 <= task_id <= MAX_TASK_ID:
        raise TaskNotFound()
    return task_id
