"""
Networked PostgreSQL storage adapter.

Connections come from a psycopg2 ThreadedConnectionPool created on first
use, are borrowed for one unit of work and then returned. Broken
connections are discarded instead of going back to the pool.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2 import pool as pg_pool
from psycopg2.extras import RealDictCursor

from .base import (
    Database,
    ReferentialIntegrityError,
    StorageError,
    StorageRangeError,
    StorageUnavailableError,
    Transaction,
)

logger = logging.getLogger(__name__)


def translate_postgres_error(exc: Exception) -> StorageError:
    """Map a psycopg2 exception onto the storage error hierarchy."""
    message = str(exc).strip()
    if isinstance(exc, pg_errors.ForeignKeyViolation):
        return ReferentialIntegrityError(message)
    if isinstance(exc, pg_errors.NumericValueOutOfRange):
        return StorageRangeError(f"Value out of range: {message}")
    if isinstance(exc, (psycopg2.OperationalError, psycopg2.InterfaceError, pg_pool.PoolError)):
        return StorageUnavailableError(f"PostgreSQL unavailable: {message}")
    return StorageError(f"PostgreSQL error: {message}")


class PostgresDatabase(Database):
    """
    PostgreSQL connection pool manager.

    Args:
        dsn: libpq connection string or URL
        pool_size: Maximum number of pooled connections
        connect_timeout: Seconds to wait when opening a connection
    """

    dialect = "postgresql"
    columns_sql = """
        SELECT column_name
        FROM information_schema.columns
        WHERE table_schema = current_schema() AND table_name = ?
    """

    def __init__(self, dsn: str, pool_size: int = 5, connect_timeout: int = 10) -> None:
        self._dsn = dsn
        self._pool_size = pool_size
        self._connect_timeout = connect_timeout
        self._pool: Optional[pg_pool.ThreadedConnectionPool] = None
        self._pool_lock = threading.Lock()

    def _get_pool(self) -> pg_pool.ThreadedConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                self._pool = pg_pool.ThreadedConnectionPool(
                    1,
                    self._pool_size,
                    dsn=self._dsn,
                    connect_timeout=self._connect_timeout,
                    cursor_factory=RealDictCursor,
                )
                logger.info(
                    "Initialized PostgreSQL connection pool",
                    extra={"pool_size": self._pool_size},
                )
            return self._pool

    @contextmanager
    def transaction(self) -> Generator[Transaction, None, None]:
        conn = None
        discard = False
        try:
            pool = self._get_pool()
            conn = pool.getconn()
            try:
                yield Transaction(conn, placeholder="%s")
                conn.commit()
            except BaseException:
                if not conn.closed:
                    conn.rollback()
                raise
        except (psycopg2.Error, pg_pool.PoolError) as e:
            discard = isinstance(e, (psycopg2.OperationalError, psycopg2.InterfaceError))
            logger.error("PostgreSQL operation failed", extra={"error": str(e)})
            raise translate_postgres_error(e) from e
        finally:
            if conn is not None and self._pool is not None:
                self._pool.putconn(conn, close=discard or bool(conn.closed))

    def close(self) -> None:
        with self._pool_lock:
            if self._pool is not None:
                self._pool.closeall()
                self._pool = None
                logger.info("Closed PostgreSQL connection pool")
