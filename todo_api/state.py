# PURPOSE: the context shared by every request handler.
# Built once in create_app() and attached to app.state; read-only afterwards.

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .db import connect_db, make_session_factory


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        """Create the connection pool for `settings` and wrap it in a context."""
        engine = connect_db(
            settings.database_url,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )
        return cls(settings=settings, engine=engine, session_factory=make_session_factory(engine))

    def close(self) -> None:
        self.engine.dispose()
