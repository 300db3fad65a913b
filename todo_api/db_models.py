# PURPOSE: define how User and Task rows look in the database.

from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


def now_utc():
    """Return timezone-aware UTC datetime (stored in DB)."""
    return datetime.now(UTC)


class TaskDB(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # task owner
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    completed = Column(Boolean, nullable=False, default=False)
    date_created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    date_modified = Column(DateTime(timezone=True), nullable=True)  # set on update only


class UserDB(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, nullable=False)
    # SHA-256 hex digest of the API key; the plaintext is never stored
    api_key_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)
    date_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)
