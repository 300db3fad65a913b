# PURPOSE: declarative Base for the ORM tables, plus the engine/session factory builder.

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

logger = logging.getLogger(__name__)

# Base: parent class for all ORM models (tables)
Base = declarative_base()


def connect_db(database_url: str, *, pool_size: int = 10, max_overflow: int = 2) -> Engine:
    """Create the engine (and with it the connection pool) for the given URL."""
    logger.info("Connecting to the database")
    if database_url.startswith("sqlite"):
        # SQLite: apply connect_args only here; the driver default pool is fine for dev/tests
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # QueuePool: pool_size persistent connections, max_overflow extra ones, callers beyond wait
    return create_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    # Sessions are opened/closed per request in FastAPI
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
