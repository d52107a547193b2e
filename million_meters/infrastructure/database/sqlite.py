"""
Embedded SQLite storage adapter.

File databases get a fresh connection per unit of work; ":memory:" keeps
one shared connection (otherwise every connection would see its own empty
database) and serializes access to it with a lock.

Foreign keys are off by default in SQLite, so every connection turns
them on before it is handed out.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from .base import (
    Database,
    ReferentialIntegrityError,
    StorageError,
    StorageRangeError,
    StorageUnavailableError,
    Transaction,
)

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


def translate_sqlite_error(exc: Exception) -> StorageError:
    """
    Map a sqlite3 exception onto the storage error hierarchy.

    sqlite3 raises a bare OverflowError, not a sqlite3.Error, when a
    bound int doesn't fit in 64 bits.
    """
    message = str(exc)
    if isinstance(exc, OverflowError):
        return StorageRangeError(f"Value out of range: {message}")
    if isinstance(exc, sqlite3.IntegrityError) and "FOREIGN KEY" in message.upper():
        return ReferentialIntegrityError(message)
    if isinstance(exc, sqlite3.OperationalError):
        return StorageUnavailableError(f"SQLite operation failed: {message}")
    return StorageError(f"SQLite error: {message}")


class SQLiteDatabase(Database):
    """
    SQLite connection manager.

    Attributes:
        db_path: Path to the SQLite database file or ":memory:"
    """

    dialect = "sqlite"
    columns_sql = "SELECT name AS column_name FROM pragma_table_info(?)"

    def __init__(self, db_path: Union[Path, str] = MEMORY_PATH, timeout: float = 5.0) -> None:
        self.db_path = str(db_path)
        self._timeout = timeout
        self._is_memory = self.db_path == MEMORY_PATH
        self._prepared = False

        # For in-memory databases, keep a persistent connection
        self._memory_conn: Optional[sqlite3.Connection] = None
        self._memory_lock = threading.Lock()

    def _open(self) -> sqlite3.Connection:
        if not self._is_memory and not self._prepared:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            self.db_path,
            timeout=self._timeout,
            check_same_thread=not self._is_memory,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")

        if not self._is_memory and not self._prepared:
            conn.execute("PRAGMA journal_mode = WAL")
            logger.info("Opened SQLite database", extra={"path": self.db_path})
        self._prepared = True
        return conn

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        if self._is_memory:
            with self._memory_lock:
                if self._memory_conn is None:
                    self._memory_conn = self._open()
                yield self._memory_conn
        else:
            conn = self._open()
            try:
                yield conn
            finally:
                conn.close()

    @contextmanager
    def transaction(self) -> Generator[Transaction, None, None]:
        """
        Handles transaction commit/rollback automatically.

        Example:
            with db.transaction() as tx:
                rows = tx.fetch_all("SELECT * FROM swimmers")
        """
        try:
            with self._connection() as conn:
                try:
                    yield Transaction(conn)
                    conn.commit()
                except BaseException:
                    conn.rollback()
                    raise
        except (sqlite3.Error, OverflowError) as e:
            logger.error(
                "SQLite operation failed",
                extra={"path": self.db_path, "error": str(e)},
            )
            raise translate_sqlite_error(e) from e

    def close(self) -> None:
        """Close the shared connection (in-memory databases only)."""
        with self._memory_lock:
            if self._memory_conn is not None:
                self._memory_conn.close()
                self._memory_conn = None
