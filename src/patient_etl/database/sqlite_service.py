"""SQLite implementation of DatabaseService."""

import sqlite3
from decimal import Decimal

from patient_etl.database.service import PooledDatabaseService
from patient_etl.database.types import Params, ParamsList, Row

# sqlite3 cannot bind Decimal; bind its text. NUMERIC affinity stores that
# text as REAL, so exact decimal storage holds only on PostgreSQL.
sqlite3.register_adapter(Decimal, str)


class SQLiteDatabaseService(PooledDatabaseService):
    """SQLite backend using stdlib sqlite3.

    ``:memory:`` maps to a named shared-cache database so every pooled
    connection sees the same tables.
    """

    dialect = "sqlite"
    placeholder = "?"

    def __init__(self, db_path: str, pool_size: int = 4):
        super().__init__(pool_size)
        self._db_path = db_path

    def _open_connection(self) -> sqlite3.Connection:
        if self._db_path == ":memory:":
            uri = f"file:patient_etl_{id(self)}?mode=memory&cache=shared"
            conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        else:
            conn = sqlite3.connect(self._db_path, check_same_thread=False)
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        conn = self._get_conn()
        cursor = conn.execute(sql, params or ())
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        self._get_conn().executemany(sql, params_list)

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            conn.executescript(sql)
            conn.commit()
        finally:
            self._release(conn)
