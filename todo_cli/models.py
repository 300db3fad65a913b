# PURPOSE: shapes returned by the list endpoint, as seen by the CLI.

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    # Items retrieved from the database
    items: list[T]
    # Page index that was retrieved
    page_index: int
    # Number of items per page
    page_size: int
    # The total number of items for this user
    total_count: int


class Task(BaseModel):
    id: int
    title: str
    description: str
    completed: bool
    date_created: datetime
    date_modified: datetime | None = None

    model_config = ConfigDict(extra="ignore")
