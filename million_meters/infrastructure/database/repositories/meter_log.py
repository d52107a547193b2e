"""
Repository for the meter log.
"""

import logging

from ....core.tracking.models import MeterEntryInput, MeterLogEntry, MeterLogRow
from ..base import Database, ReferentialIntegrityError
from ._rows import joined_sum, split_sum, to_date, to_datetime

logger = logging.getLogger(__name__)


class MeterLogRepository:
    """Repository for meter-log entries and the global total."""

    def __init__(self, database: Database) -> None:
        self._db = database

    def create(self, entry: MeterEntryInput) -> MeterLogEntry:
        """
        Insert one entry.

        The swimmer's existence is enforced by the foreign key, not by a
        prior lookup.

        Raises:
            ReferentialIntegrityError: swimmer_id doesn't reference a swimmer
        """
        try:
            row = self._db.fetch_one("""
                INSERT INTO meters_log (swimmer_id, meters, session_date, notes)
                VALUES (?, ?, ?, ?)
                RETURNING id, swimmer_id, meters, session_date, notes, created_at
            """, (
                entry.swimmer_id,
                entry.meters,
                entry.session_date.isoformat(),
                entry.notes,
            ))
        except ReferentialIntegrityError as e:
            logger.warning(
                "Meter entry rejected for unknown swimmer",
                extra={"swimmer_id": entry.swimmer_id},
            )
            raise ReferentialIntegrityError(
                f"Swimmer {entry.swimmer_id} does not exist"
            ) from e

        return MeterLogEntry(
            id=row["id"],
            swimmer_id=row["swimmer_id"],
            meters=int(row["meters"]),
            session_date=to_date(row["session_date"]),
            notes=row["notes"],
            created_at=to_datetime(row["created_at"]),
        )

    def list_with_swimmers(self) -> list[MeterLogRow]:
        """
        Every entry with its swimmer's name.

        Most recent session first; entries for the same day are ordered
        by when they were recorded, newest first.
        """
        rows = self._db.fetch_all("""
            SELECT
                m.id,
                m.swimmer_id,
                m.meters,
                m.session_date,
                m.notes,
                m.created_at,
                s.first_name,
                s.last_name
            FROM meters_log m
            JOIN swimmers s ON s.id = m.swimmer_id
            ORDER BY m.session_date DESC, m.created_at DESC, m.id DESC
        """)
        return [
            MeterLogRow(
                id=row["id"],
                swimmer_id=row["swimmer_id"],
                meters=int(row["meters"]),
                session_date=to_date(row["session_date"]),
                notes=row["notes"],
                created_at=to_datetime(row["created_at"]),
                first_name=row["first_name"],
                last_name=row["last_name"],
            )
            for row in rows
        ]

    def total_meters(self) -> int:
        row = self._db.fetch_one(
            f"SELECT {split_sum('meters', 'total_meters')} FROM meters_log"
        )
        return joined_sum(row, "total_meters") if row else 0
