"""Tests for DatabaseService (SQLite backend) and create_service."""

import threading
from decimal import Decimal

import pytest

from patient_etl import create_service
from patient_etl.database import SQLiteDatabaseService

WARDS_DDL = "CREATE TABLE wards (id INTEGER PRIMARY KEY, name TEXT, beds INTEGER)"


class TestCreateService:
    def test_sqlite_file(self, tmp_path):
        service = create_service(f"sqlite:///{tmp_path / 'x.db'}")
        assert isinstance(service, SQLiteDatabaseService)
        assert service.dialect == "sqlite"

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported database URL scheme"):
            create_service("mysql://localhost/db")

    def test_invalid_pool_size(self):
        with pytest.raises(ValueError, match="pool_size"):
            create_service("sqlite:///:memory:", pool_size=0)

    def test_memory_database_shared_across_pool(self):
        service = create_service("sqlite:///:memory:", pool_size=3)
        service.connect()
        try:
            service.execute_ddl(WARDS_DDL)
            with service.transaction():
                service.execute("INSERT INTO wards (id, name, beds) VALUES (?, ?, ?)", (1, "icu", 8))
            with service.transaction():
                rows = service.execute("SELECT name FROM wards")
            assert rows == [{"name": "icu"}]
        finally:
            service.close()


class TestDatabaseService:
    def test_execute_ddl_and_insert(self, db_service):
        db_service.execute_ddl(WARDS_DDL)
        with db_service.transaction():
            db_service.execute("INSERT INTO wards (id, name, beds) VALUES (?, ?, ?)", (1, "icu", 8))
            rows = db_service.execute("SELECT * FROM wards")
        assert rows == [{"id": 1, "name": "icu", "beds": 8}]

    def test_execute_many(self, db_service):
        db_service.execute_ddl(WARDS_DDL)
        with db_service.transaction():
            db_service.execute_many(
                "INSERT INTO wards (id, name, beds) VALUES (?, ?, ?)",
                [(1, "icu", 8), (2, "maternity", 20), (3, "oncology", 12)],
            )
            rows = db_service.execute("SELECT * FROM wards ORDER BY id")
        assert [r["name"] for r in rows] == ["icu", "maternity", "oncology"]

    def test_batch_insert(self, db_service):
        db_service.execute_ddl(WARDS_DDL)
        with db_service.transaction():
            db_service.batch_insert("wards", ["id", "name"], [(1, "icu"), (2, "er")])
            db_service.batch_insert("wards", ["id", "name"], [])
            rows = db_service.execute("SELECT * FROM wards ORDER BY id")
        assert len(rows) == 2
        assert rows[1]["beds"] is None

    def test_decimal_parameters(self, db_service):
        db_service.execute_ddl("CREATE TABLE bills (id INTEGER PRIMARY KEY, amount DECIMAL(15,6))")
        with db_service.transaction():
            db_service.batch_insert("bills", ["id", "amount"], [(1, Decimal("18.856281"))])
            rows = db_service.execute("SELECT amount FROM bills")
        assert rows[0]["amount"] == pytest.approx(18.856281)

    def test_transaction_rollback_on_error(self, db_service):
        db_service.execute_ddl(WARDS_DDL)
        with pytest.raises(ValueError):
            with db_service.transaction():
                db_service.execute("INSERT INTO wards (id, name) VALUES (?, ?)", (1, "x"))
                raise ValueError("simulated failure")

        with db_service.transaction():
            rows = db_service.execute("SELECT * FROM wards")
        assert rows == []

    def test_requires_transaction(self, db_service):
        db_service.execute_ddl(WARDS_DDL)
        with pytest.raises(RuntimeError, match="No active transaction"):
            db_service.execute("SELECT 1")

    def test_concurrent_transactions(self, db_service):
        db_service.execute_ddl(WARDS_DDL)
        errors = []

        def worker(n):
            try:
                with db_service.transaction():
                    db_service.execute(
                        "INSERT INTO wards (id, name, beds) VALUES (?, ?, ?)", (n, f"w{n}", n * 10)
                    )
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        with db_service.transaction():
            rows = db_service.execute("SELECT * FROM wards ORDER BY id")
        assert len(rows) == 4
