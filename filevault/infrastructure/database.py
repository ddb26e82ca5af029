"""
Database

SQLAlchemy engine and session management for the metadata store.
Constructed once at bootstrap and injected into the repositories.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from filevault.domain.errors import StorageError

from .models import Base

logger = logging.getLogger(__name__)

# One live record per (owner, content, category).
LIVE_CONTENT_INDEX = "uq_files_live_content"
_LIVE_CONTENT_INDEX_DDL = (
    f"CREATE UNIQUE INDEX IF NOT EXISTS {LIVE_CONTENT_INDEX} "
    "ON files (owner_id, content_hash, category) "
    "WHERE status IN ('uploading', 'active') AND deleted_at IS NULL"
)


class Database:
    """
    Owns the engine and the session factory.

    SQLite URLs get a busy timeout and cross-thread connections so that
    concurrent writers queue instead of failing immediately.
    """

    def __init__(self, url: str, echo: bool = False):
        """
        Initialize Database.

        Args:
            url: SQLAlchemy database URL
            echo: Log every SQL statement
        """
        self.url = url
        self.engine: Engine = self._create_engine(url, echo)
        self.session_factory = sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

    @staticmethod
    def _create_engine(url: str, echo: bool) -> Engine:
        if url.startswith("sqlite"):
            path = make_url(url).database
            if path and path != ":memory:" and not path.startswith("file:"):
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            logger.info("Using SQLite metadata store")
            return create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False, "timeout": 30},
            )
        logger.info("Using SQL metadata store")
        return create_engine(url, echo=echo, pool_pre_ping=True)

    @property
    def supports_update_returning(self) -> bool:
        return bool(getattr(self.engine.dialect, "update_returning", False))

    def create_schema(self, strict_dedup: bool = True) -> None:
        """
        Create tables, plus the partial unique index when ``strict_dedup``.

        Raises:
            StorageError: If the schema cannot be created
        """
        try:
            Base.metadata.create_all(self.engine)
            if strict_dedup:
                self._create_live_content_index()
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to create metadata schema",
                code="METADATA_STORE_ERROR",
                original_error=e,
            ) from e

    def _create_live_content_index(self) -> None:
        if self.engine.dialect.name not in ("sqlite", "postgresql"):
            logger.warning(
                f"Partial unique indexes are not supported on {self.engine.dialect.name}; "
                f"relying on lookup-before-insert and duplicate cleanup"
            )
            return
        with self.engine.begin() as conn:
            conn.execute(text(_LIVE_CONTENT_INDEX_DDL))
        logger.info(f"Ensured unique index {LIVE_CONTENT_INDEX}")

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back on any exception.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Metadata store health check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """
    Re-raise SQLAlchemy faults as StorageError.

    Args:
        action: Short description used in the error message
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Metadata store failed to {action}: {e}")
        raise StorageError(
            f"Metadata store failed to {action}",
            code="METADATA_STORE_ERROR",
            original_error=e,
        ) from e
