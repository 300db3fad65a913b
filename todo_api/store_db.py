# PURPOSE: persistence layer for users and tasks.
# - Every task query is scoped by owner_id.
# - SQLAlchemy errors are rolled back and re-raised as DatabaseError.

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .api.errors import DatabaseError, TaskNotFound, UserNotFound
from .db_models import TaskDB, UserDB, now_utc
from .models import PAGE_SIZE, PagedResult, TaskSummary


# --- Session dependency ----------------------------------------------------


def get_db(request: Request) -> Iterator[Session]:
    """Yield a SQLAlchemy session from the app context (used as a FastAPI dependency)."""
    db = request.app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()


# --- Helpers ---------------------------------------------------------------


@contextmanager
def _db_errors(db: Session):
    """Translate ORM/driver failures into DatabaseError, rolling back the session."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        raise DatabaseError("An error occurred while interacting with the database.") from exc


def _owned_task(db: Session, task_id: int, owner_id: int):
    return db.query(TaskDB).filter(TaskDB.id == task_id, TaskDB.owner_id == owner_id)


# --- CRUD: Tasks -----------------------------------------------------------


def list_tasks(
    db: Session,
    *,
    owner_id: int,
    page_index: int = 0,
    page_size: int = PAGE_SIZE,
) -> PagedResult[TaskSummary]:
    """
    Return one page of the owner's tasks ordered by id, plus the owner's total count.
    Two statements: the page itself and a COUNT(*) with the same owner filter.
    """
    with _db_errors(db):
        rows = (
            db.query(TaskDB)
            .filter(TaskDB.owner_id == owner_id)
            .order_by(TaskDB.id.asc())
            .offset(page_index * page_size)
            .limit(page_size)
            .all()
        )
    total = count_tasks(db, owner_id=owner_id)

    return PagedResult[TaskSummary](
        items=[TaskSummary.model_validate(row) for row in rows],
        page_index=page_index,
        page_size=page_size,
        total_count=total,
    )


def count_tasks(db: Session, *, owner_id: int) -> int:
    """Return total count of tasks owned by the user (no pagination)."""
    with _db_errors(db):
        total = db.query(func.count(TaskDB.id)).filter(TaskDB.owner_id == owner_id).scalar()
    return int(total or 0)


def get_task(db: Session, task_id: int, *, owner_id: int) -> TaskDB:
    """Fetch a single task owned by owner_id; TaskNotFound otherwise."""
    with _db_errors(db):
        row = _owned_task(db, task_id, owner_id).one_or_none()
    if row is None:
        raise TaskNotFound()
    return row


def insert_task(db: Session, *, owner_id: int, title: str, description: str) -> int:
    """Insert a new, not completed task and return its generated id."""
    row = TaskDB(
        owner_id=owner_id,
        title=title,
        description=description,
        completed=False,
        date_created=now_utc(),
    )
    with _db_errors(db):
        db.add(row)
        db.commit()
        db.refresh(row)
    return row.id


def update_task(
    db: Session,
    task_id: int,
    *,
    owner_id: int,
    title: str,
    description: str,
    completed: bool,
) -> None:
    """Overwrite title/description/completed and stamp date_modified; TaskNotFound on zero rows."""
    with _db_errors(db):
        affected = _owned_task(db, task_id, owner_id).update(
            {
                TaskDB.title: title,
                TaskDB.description: description,
                TaskDB.completed: completed,
                TaskDB.date_modified: now_utc(),
            },
            synchronize_session=False,
        )
        db.commit()
    if affected == 0:
        raise TaskNotFound()


def delete_task(db: Session, task_id: int, *, owner_id: int) -> None:
    """Delete a task; TaskNotFound if no row matched owner+id."""
    with _db_errors(db):
        affected = _owned_task(db, task_id, owner_id).delete(synchronize_session=False)
        db.commit()
    if affected == 0:
        raise TaskNotFound()


# --- Users -----------------------------------------------------------------


def insert_user(db: Session, *, email: str, api_key_hash: str) -> int:
    """Create a user row holding only the key digest; return the new id."""
    now = now_utc()
    user = UserDB(email=email, api_key_hash=api_key_hash, date_created=now, date_modified=now)
    with _db_errors(db):
        db.add(user)
        db.commit()
        db.refresh(user)
    return user.id


def get_user_by_key(db: Session, api_key_hash: str) -> UserDB:
    """Look up the user owning the given key digest; UserNotFound otherwise."""
    with _db_errors(db):
        user = db.query(UserDB).filter(UserDB.api_key_hash == api_key_hash).one_or_none()
    if user is None:
        raise UserNotFound()
    return user
