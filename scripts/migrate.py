#!/usr/bin/env python3
"""
Bring the configured database to the current schema.

Creates missing tables and, on databases from before the rename, turns
swimmers.category into share_number. The rename clears every existing
value; run with --dry-run first to see whether it would happen.

Usage:
    python scripts/migrate.py [--dry-run]

Reads the same settings as the server (.env file or environment):
STORAGE_BACKEND, DATABASE_PATH, DATABASE_URL.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add the project root to the path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from million_meters.config.settings import Settings  # noqa: E402
from million_meters.infrastructure.database import (  # noqa: E402
    SchemaManager,
    StorageError,
    create_database,
)


def main():
    parser = argparse.ArgumentParser(description='Create or migrate the Million Meters schema')
    parser.add_argument('--dry-run', action='store_true', help='Inspect only, don\'t change anything')
    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    settings = Settings()
    database = create_database(settings)
    manager = SchemaManager(database)

    print(f"Storage backend: {settings.storage_backend}")

    try:
        if args.dry_run:
            columns = database.column_names("swimmers")
            if not columns:
                print("swimmers table doesn't exist yet; it would be created")
            elif manager.needs_share_number_migration():
                print("category would be renamed to share_number (existing values reset)")
            else:
                print("Schema is current; nothing to do")
            return 0

        migrated = manager.initialize()
    except StorageError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        database.close()

    if migrated:
        print("Renamed category to share_number; previous values were reset")
    else:
        print("Schema is current")
    return 0


if __name__ == '__main__':
    sys.exit(main())
