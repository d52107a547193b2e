"""
Relational storage: adapters, schema management and repositories.

Two interchangeable backends share one schema and one set of queries:
- sqlite: embedded file database (stdlib sqlite3)
- postgres: networked server (psycopg2 connection pool)
"""

from .base import (
    Database,
    ReferentialIntegrityError,
    StorageError,
    StorageRangeError,
    StorageUnavailableError,
    Transaction,
)
from .client import create_database
from .schema import SchemaManager
from .sqlite import SQLiteDatabase

__all__ = [
    "Database",
    "ReferentialIntegrityError",
    "StorageError",
    "StorageRangeError",
    "StorageUnavailableError",
    "Transaction",
    "create_database",
    "SchemaManager",
    "SQLiteDatabase",
]
