from __future__ import annotations

from typing import Any, Dict, List, Optional

import psycopg2
import pytest

from app.core.errors import DataAccessError
from app.services import postgres as postgres_module
from app.services.postgres import PostgresService


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query: str, params: Optional[Dict[str, Any]] = None) -> None:
        if self.conn.fail_with is not None:
            raise self.conn.fail_with
        self.conn.executed.append((query, params))

    def fetchall(self) -> List[Dict[str, Any]]:
        return self.conn.rows


class FakeConnection:
    def __init__(self, rows=None, fail_with=None):
        self.rows = rows or []
        self.fail_with = fail_with
        self.executed = []
        self.closed = 0
        self.rollbacks = 0

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def rollback(self) -> None:
        self.rollbacks += 1


class FakePool:
    instances: List["FakePool"] = []

    def __init__(self, minconn, maxconn, dsn=None):
        self.minconn = minconn
        self.maxconn = maxconn
        self.dsn = dsn
        self.conn = FakeConnection()
        self.returned = []
        self.closed_all = False
        FakePool.instances.append(self)

    def getconn(self):
        return self.conn

    def putconn(self, conn, close=False):
        self.returned.append((conn, close))

    def closeall(self):
        self.closed_all = True


@pytest.fixture()
def fake_pool(monkeypatch):
    FakePool.instances = []
    monkeypatch.setattr(postgres_module, "ThreadedConnectionPool", FakePool)
    return FakePool


def test_execute_query_returns_dict_rows_and_returns_connection(fake_pool):
    svc = PostgresService("dbname=mining", min_connections=2, max_connections=4)
    rows = svc.execute_query("SELECT 1 AS ok")

    pool = fake_pool.instances[0]
    assert (pool.minconn, pool.maxconn, pool.dsn) == (2, 4, "dbname=mining")
    assert rows == []
    assert pool.conn.executed == [("SELECT 1 AS ok", {})]
    assert pool.conn.rollbacks == 1
    assert pool.returned == [(pool.conn, False)]


def test_pool_is_created_once(fake_pool):
    svc = PostgresService("dbname=mining")
    svc.execute_query("SELECT 1")
    svc.execute_query("SELECT 1")
    assert len(fake_pool.instances) == 1


def test_driver_error_becomes_data_access_error(fake_pool):
    svc = PostgresService("dbname=mining")
    svc.connect().conn.fail_with = psycopg2.ProgrammingError('relation "FactMaterial" does not exist')

    with pytest.raises(DataAccessError) as exc_info:
        svc.execute_query('SELECT * FROM "FactMaterial"')

    assert "FactMaterial" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, psycopg2.Error)
    # connection is still open, so it goes back to the pool for reuse
    assert svc.pool.returned[-1][1] is False


def test_unreachable_server_becomes_data_access_error(monkeypatch):
    def refuse(*args, **kwargs):
        raise psycopg2.OperationalError("could not connect to server: Connection refused")

    monkeypatch.setattr(postgres_module, "ThreadedConnectionPool", refuse)
    svc = PostgresService("host=127.0.0.1 port=1")

    with pytest.raises(DataAccessError):
        svc.execute_query("SELECT 1")
    assert svc.check_health() == "unhealthy"


def test_check_health_healthy(fake_pool):
    assert PostgresService("dbname=mining").check_health() == "healthy"


def test_close_closes_pool(fake_pool):
    svc = PostgresService("dbname=mining")
    svc.connect()
    pool = svc.pool
    svc.close()
    assert pool.closed_all
    assert svc.pool is None
