"""
Tracking service: the query/command interface behind the REST API.

The service validates input, delegates persistence to the stores it was
given, and runs the aggregation engine. It knows nothing about HTTP or
which database backend is in use.
"""

import logging
from typing import Any, Optional, Protocol

from .models import (
    GOAL_METERS,
    MeterEntryInput,
    MeterLogEntry,
    MeterLogRow,
    Summary,
    Swimmer,
    SwimmerInput,
    SwimmerTotals,
)
from .summary import build_summary
from .validation import validate_meter_entry_input, validate_swimmer_input

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class SwimmerStore(Protocol):
    """Persistence operations for swimmers."""

    def list_all(self) -> list[Swimmer]: ...
    def create(self, swimmer: SwimmerInput) -> Swimmer: ...
    def delete(self, swimmer_id: int) -> bool: ...
    def totals(self) -> list[SwimmerTotals]: ...


class MeterLogStore(Protocol):
    """Persistence operations for meter-log entries."""

    def create(self, entry: MeterEntryInput) -> MeterLogEntry: ...
    def list_with_swimmers(self) -> list[MeterLogRow]: ...
    def total_meters(self) -> int: ...


class SwimmerNotFoundError(Exception):
    """Raised when a requested swimmer doesn't exist."""

    def __init__(self, swimmer_id: int) -> None:
        super().__init__(f"Swimmer {swimmer_id} not found")
        self.swimmer_id = swimmer_id


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class MeterTracker:
    """
    Swimmer registry, meter log and goal progress.

    Stateless apart from its stores: every read goes back to storage, so
    two trackers over the same database always agree.
    """

    def __init__(self, swimmers: SwimmerStore, meter_log: MeterLogStore) -> None:
        self._swimmers = swimmers
        self._meter_log = meter_log

    def list_swimmers(self) -> list[Swimmer]:
        """All swimmers ordered by last name, then first name."""
        return self._swimmers.list_all()

    def create_swimmer(
        self,
        first_name: Any,
        last_name: Any,
        share_number: Any = None,
    ) -> Swimmer:
        swimmer_input = validate_swimmer_input(first_name, last_name, share_number)
        swimmer = self._swimmers.create(swimmer_input)

        logger.info(
            "Swimmer registered",
            extra={"swimmer_id": swimmer.id, "share_number": swimmer.share_number},
        )
        return swimmer

    def delete_swimmer(self, swimmer_id: int) -> None:
        """Remove a swimmer together with every meter entry they logged."""
        if not self._swimmers.delete(swimmer_id):
            raise SwimmerNotFoundError(swimmer_id)

        logger.info("Swimmer deleted", extra={"swimmer_id": swimmer_id})

    def log_meters(
        self,
        swimmer_id: Any,
        meters: Any,
        session_date: Any,
        notes: Optional[str] = None,
    ) -> MeterLogEntry:
        entry_input = validate_meter_entry_input(swimmer_id, meters, session_date, notes)
        entry = self._meter_log.create(entry_input)

        logger.info(
            "Meters logged",
            extra={
                "entry_id": entry.id,
                "swimmer_id": entry.swimmer_id,
                "meters": entry.meters,
                "session_date": entry.session_date.isoformat(),
            },
        )
        return entry

    def list_meter_log(self) -> list[MeterLogRow]:
        """Every entry, most recent session first."""
        return self._meter_log.list_with_swimmers()

    def compute_summary(self, goal: int = GOAL_METERS) -> Summary:
        """Recompute totals, ranking and progress from current storage."""
        total = self._meter_log.total_meters()
        totals = self._swimmers.totals()

        summary = build_summary(goal, total, totals)
        logger.debug(
            "Summary computed",
            extra={
                "total_meters": summary.total_meters,
                "percentage": summary.percentage,
                "swimmer_count": summary.swimmer_count,
            },
        )
        return summary
