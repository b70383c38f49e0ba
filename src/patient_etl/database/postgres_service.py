"""PostgreSQL implementation of DatabaseService."""

import psycopg2
import psycopg2.extras

from patient_etl.database.service import PooledDatabaseService
from patient_etl.database.types import Params, ParamsList, Row


class PostgresDatabaseService(PooledDatabaseService):
    """PostgreSQL backend using psycopg2.

    DECIMAL columns come back as ``decimal.Decimal``; Decimal parameters
    are bound exactly.
    """

    dialect = "postgresql"
    placeholder = "%s"

    def __init__(self, dsn: str, pool_size: int = 4):
        super().__init__(pool_size)
        self._dsn = dsn

    def _open_connection(self):
        conn = psycopg2.connect(self._dsn)
        conn.autocommit = False
        return conn

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        conn = self._get_conn()
        with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(sql, params or ())
            if cur.description is None:
                return []
            return [dict(row) for row in cur.fetchall()]

    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        conn = self._get_conn()
        with conn.cursor() as cur:
            psycopg2.extras.execute_batch(cur, sql, params_list)

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            with conn.cursor() as cur:
                for statement in sql.split(";"):
                    statement = statement.strip()
                    if statement:
                        cur.execute(statement)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)
