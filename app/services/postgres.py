# app/services/postgres.py
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import psycopg2
import structlog
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from app.core.errors import DataAccessError

logger = structlog.get_logger()


class PostgresService:
    """
    Owns the connection pool for the mining database.

    The pool is created lazily on first use and handed out one connection
    per query. Checkouts are bounded by a semaphore sized to the pool, so
    callers block for a free connection instead of getting PoolError.
    """

    def __init__(
        self,
        conninfo: str,
        min_connections: int = 1,
        max_connections: int = 10,
    ):
        self.conninfo = conninfo
        self.min_connections = min_connections
        self.max_connections = max_connections
        self.pool: Optional[ThreadedConnectionPool] = None
        self._pool_lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(max_connections)

    def connect(self) -> ThreadedConnectionPool:
        """Create the connection pool if it does not exist yet"""
        with self._pool_lock:
            if self.pool is None:
                try:
                    self.pool = ThreadedConnectionPool(
                        self.min_connections,
                        self.max_connections,
                        dsn=self.conninfo,
                    )
                except psycopg2.Error as e:
                    raise DataAccessError(f"Could not connect to PostgreSQL: {e}") from e
                logger.info(
                    "postgres_pool_opened",
                    min_connections=self.min_connections,
                    max_connections=self.max_connections,
                )
            return self.pool

    def close(self) -> None:
        """Close every pooled connection"""
        with self._pool_lock:
            if self.pool is not None:
                self.pool.closeall()
                self.pool = None
                logger.info("postgres_pool_closed")

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Borrow a pooled connection, returning it (or discarding it if broken)."""
        pool = self.connect()
        with self._slots:
            try:
                conn = pool.getconn()
            except psycopg2.Error as e:
                raise DataAccessError(f"Could not obtain a PostgreSQL connection: {e}") from e
            broken = False
            try:
                yield conn
            except psycopg2.Error:
                broken = bool(conn.closed)
                raise
            finally:
                pool.putconn(conn, close=broken)

    def execute_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Execute a read-only SELECT and return rows as dicts"""
        try:
            with self.connection() as conn:
                try:
                    with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                        cursor.execute(query, params or {})
                        rows = cursor.fetchall()
                finally:
                    # end the read transaction so the connection goes back clean
                    if not conn.closed:
                        conn.rollback()
                return [dict(row) for row in rows]
        except psycopg2.Error as e:
            raise DataAccessError(str(e).strip() or e.__class__.__name__) from e

    def check_health(self) -> str:
        """Check if PostgreSQL is accessible"""
        try:
            self.execute_query("SELECT 1 AS ok")
            return "healthy"
        except DataAccessError as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return "unhealthy"
