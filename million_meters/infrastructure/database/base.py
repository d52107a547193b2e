"""
Storage adapter contract shared by the SQLite and PostgreSQL backends.

Repositories write SQL once, with qmark (?) placeholders, and run it
through a Transaction. Each backend supplies connections, converts
placeholders for its driver and translates driver exceptions into the
StorageError hierarchy below, so nothing above this layer ever sees
sqlite3 or psycopg2 types.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Generator, Optional, Sequence

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a storage operation fails."""
    pass


class StorageUnavailableError(StorageError):
    """Raised when the database can't be reached or the schema can't be applied."""
    pass


class ReferentialIntegrityError(StorageError):
    """Raised when a write references a row that doesn't exist."""
    pass


class StorageRangeError(StorageError):
    """Raised when a value is outside the 64-bit integer range both backends store."""
    pass


Row = dict[str, Any]


class Transaction:
    """
    One unit of work on a single DB-API connection.

    Rows come back as plain dicts regardless of backend.
    """

    def __init__(self, connection, placeholder: str = "?") -> None:
        self._conn = connection
        self._placeholder = placeholder

    def _prepare(self, sql: str) -> str:
        if self._placeholder == "?":
            return sql
        return sql.replace("?", self._placeholder)

    def _cursor(self):
        return self._conn.cursor()

    def _run(self, cursor, sql: str, params: Sequence[Any]) -> None:
        if params:
            cursor.execute(self._prepare(sql), tuple(params))
        else:
            cursor.execute(sql)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement and return the number of affected rows."""
        cursor = self._cursor()
        try:
            self._run(cursor, sql, params)
            return cursor.rowcount
        finally:
            cursor.close()

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        cursor = self._cursor()
        try:
            self._run(cursor, sql, params)
            return [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
        rows = self.fetch_all(sql, params)
        return rows[0] if rows else None


class Database(ABC):
    """
    Base class for storage adapters.

    Instances are constructed explicitly and passed to whatever needs
    them; no connection state lives at module level. Construction does
    no I/O: the first transaction opens the first connection.
    """

    #: Backend name, used by the schema manager to pick DDL.
    dialect: str = ""

    #: Query listing a table's columns as "column_name" rows.
    columns_sql: str = ""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Generator[Transaction, None, None]:
        """
        Provide a unit of work that commits on success and rolls back
        on any error.
        """
        ...

    def column_names(self, table: str, tx: Optional[Transaction] = None) -> set[str]:
        """
        Live column set of a table (empty if the table doesn't exist).

        Pass tx to inspect inside an open unit of work.
        """
        if tx is None:
            rows = self.fetch_all(self.columns_sql, (table,))
        else:
            rows = tx.fetch_all(self.columns_sql, (table,))
        return {row["column_name"] for row in rows}

    def close(self) -> None:
        """Release connections held by the adapter."""
        pass

    # -----------------------------------------------------------------------
    # Single-statement helpers
    # -----------------------------------------------------------------------

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        with self.transaction() as tx:
            return tx.execute(sql, params)

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        with self.transaction() as tx:
            return tx.fetch_all(sql, params)

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
        with self.transaction() as tx:
            return tx.fetch_one(sql, params)

    def ping(self) -> None:
        """Round-trip a trivial query; raises StorageError if that fails."""
        self.fetch_one("SELECT 1 AS ok")
