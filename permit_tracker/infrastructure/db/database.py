"""
Database connection management.

Supports:
  - SQLite (local dev, no setup)
  - PostgreSQL (any SQLAlchemy URL works)

The URL comes from configuration and is resolved once, when the process
builds its `Database`.
"""

import logging
import time
from contextlib import contextmanager
from collections.abc import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from permit_tracker.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


def create_db_engine(url: str) -> Engine:
    """Create SQLAlchemy engine."""
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False,
        )

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        engine = create_engine(
            url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            echo=False,
        )

    return engine


class Database:
    """Engine + session factory for one database URL."""

    def __init__(self, url: str):
        self.url = url
        self.engine = create_db_engine(url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def display_url(self) -> str:
        """URL without credentials, for logs and status pages."""
        return self.url.split("@")[-1] if "@" in self.url else self.url

    def init_db(self) -> None:
        """Create all tables. Safe to call multiple times."""
        Base.metadata.create_all(self.engine)
        logger.info(f"Database initialized: {self.display_url}")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Unit of work: commit on success, rollback on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> float:
        """Round-trip a trivial query. Returns latency in ms."""
        t0 = time.perf_counter()
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return round((time.perf_counter() - t0) * 1000, 2)

    def dispose(self) -> None:
        self.engine.dispose()
