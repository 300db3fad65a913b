# PURPOSE: /v1/todos handlers. Every route runs the API-key gate first
# and scopes its query to the authenticated user.

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..api.deps import parse_page, parse_task_id
from ..api.errors import ValidationFailed
from ..auth import get_current_user_id
from ..models import (
    PAGE_SIZE,
    CreateTaskForm,
    CreateTaskResult,
    PagedResult,
    Task,
    TaskSummary,
    UpdateTaskForm,
)
from ..store_db import (
    get_db,
    list_tasks as db_list_tasks,
    insert_task as db_insert_task,
    get_task as db_get_task,
    update_task as db_update_task,
    delete_task as db_delete_task,
)

router = APIRouter(prefix="/todos", tags=["tasks"])


@router.get("", response_model=PagedResult[TaskSummary])
def list_tasks(
    user_id: int = Depends(get_current_user_id),
    page: int = Depends(parse_page),
    db: Session = Depends(get_db),
):
    return db_list_tasks(db, owner_id=user_id, page_index=page, page_size=PAGE_SIZE)


@router.get("/{task_id}", response_model=Task)
def get_task(
    user_id: int = Depends(get_current_user_id),
    task_id: int = Depends(parse_task_id),
    db: Session = Depends(get_db),
):
    return db_get_task(db, task_id, owner_id=user_id)


@router.post("", response_model=CreateTaskResult, status_code=status.HTTP_201_CREATED)
def create_task(
    form: CreateTaskForm,
    response: Response,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    errors = form.validate_fields()
    if errors:
        raise ValidationFailed(errors)
    task_id = db_insert_task(db, owner_id=user_id, title=form.title, description=form.description)
    response.headers["Location"] = f"/v1/todos/{task_id}"
    return CreateTaskResult(id=task_id)


@router.put("/{task_id}", status_code=status.HTTP_202_ACCEPTED)
def update_task(
    form: UpdateTaskForm,
    user_id: int = Depends(get_current_user_id),
    task_id: int = Depends(parse_task_id),
    db: Session = Depends(get_db),
):
    errors = form.validate_fields()
    if errors:
        raise ValidationFailed(errors)
    db_update_task(
        db, task_id, owner_id=user_id,
        title=form.title, description=form.description, completed=form.completed,
    )
    return Response(status_code=status.HTTP_202_ACCEPTED)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    user_id: int = Depends(get_current_user_id),
    task_id: int = Depends(parse_task_id),
    db: Session = Depends(get_db),
):
    db_delete_task(db, task_id, owner_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
