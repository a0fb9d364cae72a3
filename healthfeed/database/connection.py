"""
Database Connection Management.

One SQLAlchemy engine per process, created lazily on first use. The
engine options depend on the backend: SQLite (development and tests)
is opened for use from several threads and has foreign keys switched
on, other databases get a small connection pool.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from healthfeed.core.config import get_settings
from healthfeed.core.logging_config import get_logger

logger = get_logger(__name__)


def engine_options(db_url: str) -> Dict[str, Any]:
    """create_engine keyword arguments for a database URL."""
    options: Dict[str, Any] = {"pool_pre_ping": True, "echo": False}
    if db_url.startswith("sqlite"):
        # FastAPI runs sync dependencies in a threadpool
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = 5
        options["max_overflow"] = 10
    return options


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseConnection:
    """
    Owns the engine and hands out short-lived sessions.

    Example:
        >>> db = DatabaseConnection("sqlite:///healthfeed.db")
        >>> with db.get_session() as session:
        ...     session.execute(text("SELECT count(*) FROM articles")).scalar()
    """

    def __init__(self, connection_url: Optional[str] = None):
        db_url = connection_url or get_settings().database_url

        self.engine = create_engine(db_url, **engine_options(db_url))
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

        logger.info(f"Database engine ready: {make_url(db_url).render_as_string(hide_password=True)}")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Session scoped to one unit of work.

        Commits when the block exits normally, rolls back and re-raises
        on database errors, and always closes the session.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Rolled back after database error: {e}")
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """True if a trivial query succeeds."""
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database connection check failed: {e}")
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


_db_connection: Optional[DatabaseConnection] = None


def get_database() -> DatabaseConnection:
    """Process-wide DatabaseConnection, created on first call."""
    global _db_connection
    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection


def reset_database() -> None:
    """Dispose the current engine so the next call builds a fresh one."""
    global _db_connection
    if _db_connection is not None:
        _db_connection.close()
    _db_connection = None
