"""DuckDB client utilities for reading marketplace aggregates."""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import duckdb

from ..config.schemas import DuckDBConfig


class DuckDBClient:
    """Client for DuckDB database operations.

    Queries may be issued concurrently from worker threads: every call runs on
    its own cursor, and in-memory databases keep one persistent connection so
    all cursors see the same data.
    """

    def __init__(
        self,
        database_path: str | None = None,
        read_only: bool = False,
        threads: int = 4,
        memory_limit_gb: int | None = None,
    ):
        """Initialize DuckDB client.

        Args:
            database_path: Path to database file, or None for in-memory
            read_only: Whether to open file databases in read-only mode
            threads: DuckDB worker threads per connection
            memory_limit_gb: Optional DuckDB memory limit
        """
        self.database_path = database_path or ":memory:"
        self.read_only = read_only if self.database_path != ":memory:" else False
        self.threads = threads
        self.memory_limit_gb = memory_limit_gb
        self._persistent_conn: duckdb.DuckDBPyConnection | None = None

    @classmethod
    def from_config(cls, config: DuckDBConfig) -> "DuckDBClient":
        return cls(
            database_path=config.database_path,
            read_only=config.read_only,
            threads=config.threads,
            memory_limit_gb=config.memory_limit_gb,
        )

    def _configure(self, conn: duckdb.DuckDBPyConnection) -> None:
        conn.execute(f"SET threads={int(self.threads)}")
        if self.memory_limit_gb:
            conn.execute(f"SET memory_limit='{int(self.memory_limit_gb)}GB'")

    @contextmanager
    def connection(self) -> Iterator[duckdb.DuckDBPyConnection]:
        """Context manager yielding a cursor safe to use from the calling thread."""
        if self.database_path == ":memory:":
            if self._persistent_conn is None:
                self._persistent_conn = duckdb.connect(self.database_path)
                self._configure(self._persistent_conn)
            cursor = self._persistent_conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()
        else:
            conn = None
            try:
                conn = duckdb.connect(self.database_path, read_only=self.read_only)
                self._configure(conn)
                yield conn
            finally:
                if conn:
                    conn.close()

    def execute_query(
        self, query: str, parameters: Sequence[Any] | dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute a query and return results as list of dictionaries."""
        with self.connection() as conn:
            if parameters:
                result = conn.execute(query, parameters)
            else:
                result = conn.execute(query)

            columns = [desc[0] for desc in result.description]
            rows = result.fetchall()
            return [dict(zip(columns, row, strict=False)) for row in rows]

    def close(self) -> None:
        """Close persistent connection if it exists."""
        if self._persistent_conn:
            self._persistent_conn.close()
            self._persistent_conn = None
