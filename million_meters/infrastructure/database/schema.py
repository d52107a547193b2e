"""
Schema definitions and the share_number migration.

Table creation is idempotent and runs on every start. The migration is a
one-shot structural change keyed on the live column set: once
swimmers.share_number exists it never runs again.
"""

import logging

from .base import Database, StorageError, StorageUnavailableError

logger = logging.getLogger(__name__)


# Each schema is a list of statements rather than one script so both
# drivers can run them through the same Transaction.execute.
SQLITE_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS swimmers (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        first_name TEXT NOT NULL,
        last_name TEXT NOT NULL,
        share_number INTEGER CHECK (share_number IS NULL OR share_number BETWEEN 1 AND 999),
        created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meters_log (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        swimmer_id INTEGER NOT NULL REFERENCES swimmers(id) ON DELETE CASCADE,
        meters INTEGER NOT NULL CHECK (meters > 0),
        session_date TEXT NOT NULL,
        notes TEXT,
        created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_meters_log_swimmer ON meters_log(swimmer_id)",
    "CREATE INDEX IF NOT EXISTS idx_meters_log_session ON meters_log(session_date, created_at)",
]

POSTGRES_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS swimmers (
        id SERIAL PRIMARY KEY,
        first_name TEXT NOT NULL,
        last_name TEXT NOT NULL,
        share_number INTEGER CHECK (share_number IS NULL OR share_number BETWEEN 1 AND 999),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meters_log (
        id SERIAL PRIMARY KEY,
        swimmer_id INTEGER NOT NULL REFERENCES swimmers(id) ON DELETE CASCADE,
        meters BIGINT NOT NULL CHECK (meters > 0),
        session_date DATE NOT NULL,
        notes TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_meters_log_swimmer ON meters_log(swimmer_id)",
    "CREATE INDEX IF NOT EXISTS idx_meters_log_session ON meters_log(session_date, created_at)",
]

# Old values are discarded on purpose: category held free text that has
# no meaning as a share number.
SQLITE_SHARE_NUMBER_MIGRATION = [
    "BEGIN",
    "ALTER TABLE swimmers RENAME COLUMN category TO share_number",
    "UPDATE swimmers SET share_number = NULL",
]

POSTGRES_SHARE_NUMBER_MIGRATION = [
    "ALTER TABLE swimmers RENAME COLUMN category TO share_number",
    "ALTER TABLE swimmers ALTER COLUMN share_number TYPE INTEGER USING NULL",
]

SCHEMAS = {
    "sqlite": SQLITE_SCHEMA,
    "postgresql": POSTGRES_SCHEMA,
}

MIGRATIONS = {
    "sqlite": SQLITE_SHARE_NUMBER_MIGRATION,
    "postgresql": POSTGRES_SHARE_NUMBER_MIGRATION,
}

LEGACY_COLUMN = "category"
CURRENT_COLUMN = "share_number"


class SchemaManager:
    """
    Brings storage to the current schema shape.

    Any failure is raised as StorageUnavailableError: the application
    must not serve traffic on a half-migrated schema.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        try:
            self._schema = SCHEMAS[database.dialect]
            self._migration = MIGRATIONS[database.dialect]
        except KeyError:
            raise ValueError(f"Unsupported database dialect: {database.dialect!r}")

    def initialize(self) -> bool:
        """Create missing tables, then apply the share_number migration if needed."""
        self.ensure_schema()
        return self.migrate_share_number()

    def ensure_schema(self) -> None:
        """Create both tables and their indexes if they don't exist yet."""
        try:
            with self._db.transaction() as tx:
                for statement in self._schema:
                    tx.execute(statement)
        except StorageError as e:
            logger.error("Schema creation failed", extra={"error": str(e)})
            raise StorageUnavailableError(f"Schema creation failed: {e}") from e

        logger.info("Schema ready", extra={"dialect": self._db.dialect})

    def needs_share_number_migration(self) -> bool:
        columns = self._db.column_names("swimmers")
        return LEGACY_COLUMN in columns and CURRENT_COLUMN not in columns

    def migrate_share_number(self) -> bool:
        """
        Rename swimmers.category to share_number and clear every value.

        Returns True if the migration ran, False if the schema was
        already current.
        """
        try:
            with self._db.transaction() as tx:
                columns = self._db.column_names("swimmers", tx=tx)
                if CURRENT_COLUMN in columns or LEGACY_COLUMN not in columns:
                    logger.debug("share_number migration not needed")
                    return False

                for statement in self._migration:
                    tx.execute(statement)
        except StorageError as e:
            logger.error("share_number migration failed", extra={"error": str(e)})
            raise StorageUnavailableError(f"share_number migration failed: {e}") from e

        logger.warning(
            "Migrated swimmers.category to share_number; previous values were reset",
            extra={"dialect": self._db.dialect},
        )
        return True
