"""Database configuration and session management."""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from resto_rate.config import Settings

logger = logging.getLogger(__name__)

Base: Any = declarative_base()


class Database:
    """Connection pool and session factory owned by the application lifespan."""

    def __init__(self, url: str, pool_size: int = 5, max_overflow: int = 10):
        self.url = url
        if url.startswith("sqlite"):
            self.engine = create_engine(url, connect_args={"check_same_thread": False})
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,
                pool_size=pool_size,
                max_overflow=max_overflow,
            )
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    def session(self) -> Generator[Session, None, None]:
        """Yield a session and close it afterwards."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def create_all(self) -> None:
        """Create all tables registered on Base.metadata."""
        # Import all models here so they are registered with Base.metadata
        from resto_rate import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        """Check that the database accepts connections."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE clauses unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_database(request: Request) -> Database:
    """Dependency that returns the database attached at startup."""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    yield from get_database(request).session()
