"""
Repository for swimmers.

The application code never writes SQL directly; it asks the repository
for what it needs in domain terms.
"""

import logging

from ....core.tracking.models import Swimmer, SwimmerInput, SwimmerTotals
from ..base import Database
from ._rows import joined_sum, split_sum, to_datetime, to_optional_int

logger = logging.getLogger(__name__)


class SwimmerRepository:
    """
    Repository for swimmer persistence and per-swimmer totals.

    Each method corresponds to a use case the application needs:
    - list_all: The roster, ordered by name
    - create: Register a new swimmer
    - delete: Remove a swimmer and their log entries
    - totals: Meters and session counts for every swimmer
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def list_all(self) -> list[Swimmer]:
        """
        All swimmers by last name, then first name.

        Sorted here rather than in SQL so the order is plain code-point
        order on both backends instead of depending on the server's
        collation.
        """
        rows = self._db.fetch_all("""
            SELECT id, first_name, last_name, share_number, created_at
            FROM swimmers
        """)
        swimmers = [self._build_swimmer(row) for row in rows]
        swimmers.sort(key=lambda s: (s.last_name, s.first_name, s.id))
        return swimmers

    def create(self, swimmer: SwimmerInput) -> Swimmer:
        row = self._db.fetch_one("""
            INSERT INTO swimmers (first_name, last_name, share_number)
            VALUES (?, ?, ?)
            RETURNING id, first_name, last_name, share_number, created_at
        """, (swimmer.first_name, swimmer.last_name, swimmer.share_number))
        return self._build_swimmer(row)

    def delete(self, swimmer_id: int) -> bool:
        """
        Delete a swimmer and every entry they logged.

        Entries are removed explicitly before the swimmer, in the same
        transaction: tables created before the cascade clause existed
        don't delete them on their own.

        Returns False if no such swimmer exists.
        """
        with self._db.transaction() as tx:
            entries = tx.execute(
                "DELETE FROM meters_log WHERE swimmer_id = ?", (swimmer_id,)
            )
            deleted = tx.execute("DELETE FROM swimmers WHERE id = ?", (swimmer_id,))

        if deleted:
            logger.debug(
                "Deleted swimmer rows",
                extra={"swimmer_id": swimmer_id, "entries_deleted": entries},
            )
        return deleted > 0

    def totals(self) -> list[SwimmerTotals]:
        """Every swimmer with their meter and session totals (zero if none)."""
        rows = self._db.fetch_all(f"""
            SELECT
                s.id,
                s.first_name,
                s.last_name,
                s.share_number,
                {split_sum("m.meters", "total_meters")},
                COUNT(m.id) AS total_sessions
            FROM swimmers s
            LEFT JOIN meters_log m ON m.swimmer_id = s.id
            GROUP BY s.id, s.first_name, s.last_name, s.share_number
        """)
        return [
            SwimmerTotals(
                id=row["id"],
                first_name=row["first_name"],
                last_name=row["last_name"],
                share_number=to_optional_int(row["share_number"]),
                total_meters=joined_sum(row, "total_meters"),
                total_sessions=int(row["total_sessions"]),
            )
            for row in rows
        ]

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    def _build_swimmer(self, row) -> Swimmer:
        return Swimmer(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            share_number=to_optional_int(row["share_number"]),
            created_at=to_datetime(row["created_at"]),
        )
