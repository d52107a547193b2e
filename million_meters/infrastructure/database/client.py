"""
Storage adapter factory.

Most code never touches this module directly: the application builds one
adapter at startup and repositories receive it through dependency
injection.
"""

import logging

from ...config.settings import Settings
from .base import Database
from .sqlite import SQLiteDatabase

logger = logging.getLogger(__name__)


def create_database(settings: Settings) -> Database:
    """
    Create the storage adapter selected by settings.storage_backend.

    No connection is opened here; the first transaction does that.

    Args:
        settings: Application settings

    Returns:
        Database implementation (SQLite or PostgreSQL)
    """
    if settings.storage_backend == "postgres":
        # Imported lazily so SQLite deployments never load psycopg2
        from .postgres import PostgresDatabase

        logger.info(
            "Using PostgreSQL storage",
            extra={"tls": "sslmode=disable" not in settings.postgres_dsn},
        )
        return PostgresDatabase(
            dsn=settings.postgres_dsn,
            pool_size=settings.database_pool_size,
            connect_timeout=settings.database_connect_timeout,
        )

    logger.info("Using SQLite storage", extra={"path": settings.database_path})
    return SQLiteDatabase(settings.database_path)
