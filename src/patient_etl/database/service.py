"""Abstract DatabaseService interface and the pooled base shared by backends."""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Any, Iterator

from patient_etl.database.types import Params, ParamsList, Row

POOL_TIMEOUT_SECONDS = 30


class DatabaseService(ABC):
    """Backend-agnostic interface used by the storage stage.

    - Pooled: connections are created up front by connect()
    - Thread-safe: each transaction() holds its own connection
    - Dialect-aware: ``dialect`` names the SQL flavour for DDL rendering
    """

    dialect: str

    @abstractmethod
    def connect(self) -> None:
        """Initialize the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close all connections and release resources."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        """Execute a SQL statement for each parameter set."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: acquires a connection, commits on success, rolls back on error."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, CREATE INDEX, etc.)."""

    @abstractmethod
    def batch_insert(self, table: str, columns: list[str], rows: list[tuple]) -> None:
        """Insert multiple rows into a table."""


class PooledDatabaseService(DatabaseService):
    """Connection-pool and SQL-building logic shared by the backends.

    Connections live in a bounded Queue. transaction() checks one out, binds
    it to the calling thread, commits on success and rolls back on error.
    Subclasses open connections and run statements through their driver.
    """

    placeholder = "?"

    def __init__(self, pool_size: int = 4):
        if pool_size < 1:
            raise ValueError(f"pool_size must be >= 1, got {pool_size}")
        self._pool_size = pool_size
        self._pool: Queue = Queue(maxsize=pool_size)
        self._local = threading.local()

    @abstractmethod
    def _open_connection(self) -> Any:
        """Open one driver connection for the pool."""

    def connect(self) -> None:
        for _ in range(self._pool_size):
            self._pool.put(self._open_connection())

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
            except Empty:
                break
            conn.close()

    def _acquire(self) -> Any:
        return self._pool.get(timeout=POOL_TIMEOUT_SECONDS)

    def _release(self, conn: Any) -> None:
        self._pool.put(conn)

    def _get_conn(self) -> Any:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            raise RuntimeError(
                "No active transaction. Wrap calls in a `with service.transaction():` block."
            )
        return conn

    @contextmanager
    def transaction(self) -> Iterator[None]:
        conn = self._acquire()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            self._release(conn)

    def _insert_sql(self, table: str, columns: list[str]) -> str:
        cols = ", ".join(columns)
        placeholders = ", ".join(self.placeholder for _ in columns)
        return f"INSERT INTO {table} ({cols}) VALUES ({placeholders})"

    def batch_insert(self, table: str, columns: list[str], rows: list[tuple]) -> None:
        if not rows:
            return
        self.execute_many(self._insert_sql(table, columns), rows)

