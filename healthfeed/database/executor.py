"""
Query Executor - Parameterized SQL execution.

This module provides:
- Execution of parameterized statements (Core selects, inserts, updates, text)
- Query timing and logging
- Result formatting as plain dict rows
- Translation of driver errors into DatabaseError
"""
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from healthfeed.core.exceptions import DatabaseError
from healthfeed.core.logging_config import get_logger
from healthfeed.database.connection import DatabaseConnection, get_database

logger = get_logger(__name__)


@dataclass
class QueryResult:
    """
    Result of a database query.

    Attributes:
        rows: List of rows as dictionaries
        row_count: Number of rows returned
        execution_time_ms: Query execution time in milliseconds
    """
    rows: List[Dict[str, Any]]
    row_count: int
    execution_time_ms: float

    def first(self) -> Optional[Dict[str, Any]]:
        """First row, or None when the query matched nothing."""
        return self.rows[0] if self.rows else None


class QueryExecutor:
    """
    Executes parameterized statements with logging and timing.

    Every statement runs in its own transaction; writes are committed
    when the statement succeeds.

    Example:
        >>> executor = QueryExecutor()
        >>> result = executor.execute("SELECT id FROM articles WHERE id < :cursor", {"cursor": 5})
        >>> for row in result.rows:
        ...     print(row["id"])
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    def execute(
        self,
        statement: Union[str, Executable],
        params: Optional[Dict[str, Any]] = None,
        description: str = "query",
    ) -> QueryResult:
        """
        Execute a statement and return its rows.

        Args:
            statement: SQL string (bound with named parameters) or SQLAlchemy statement
            params: Optional parameters for parameterized queries
            description: Short label used in log lines

        Returns:
            QueryResult with the returned rows

        Raises:
            DatabaseError: If the driver raises
        """
        if isinstance(statement, str):
            statement = text(statement)

        start_time = time.perf_counter()

        try:
            with self.db.get_session() as session:
                result = session.execute(statement, params or {})
                rows = [dict(row) for row in result.mappings().all()] if result.returns_rows else []
        except SQLAlchemyError as e:
            execution_time = (time.perf_counter() - start_time) * 1000
            logger.error(f"{description} failed after {execution_time:.2f}ms: {e}")
            raise DatabaseError(details=description) from e

        execution_time = (time.perf_counter() - start_time) * 1000
        logger.debug(f"{description}: {len(rows)} rows in {execution_time:.2f}ms")

        return QueryResult(
            rows=rows,
            row_count=len(rows),
            execution_time_ms=execution_time,
        )
