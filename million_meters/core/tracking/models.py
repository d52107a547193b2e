"""
Domain models for the million-meter challenge.

These models represent the core business concepts. They have no dependencies
on external frameworks, databases, or APIs. Repositories build them from
database rows and the API layer turns them into JSON.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


# The shared target every logged meter counts toward. Fixed for the
# challenge, not a runtime setting.
GOAL_METERS = 1_000_000

SHARE_NUMBER_MIN = 1
SHARE_NUMBER_MAX = 999


@dataclass(frozen=True)
class SwimmerInput:
    """Validated fields for a new swimmer."""
    first_name: str
    last_name: str
    share_number: Optional[int] = None


@dataclass(frozen=True)
class MeterEntryInput:
    """Validated fields for a new meter-log entry."""
    swimmer_id: int
    meters: int
    session_date: date
    notes: Optional[str] = None


@dataclass
class Swimmer:
    """
    A registered swimmer.

    share_number lives in the storage slot that used to hold the
    free-text category; it is unset for every swimmer created before
    the rename.
    """
    id: int
    first_name: str
    last_name: str
    share_number: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class MeterLogEntry:
    """A single training session's distance for one swimmer."""
    id: int
    swimmer_id: int
    meters: int
    session_date: date
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class MeterLogRow(MeterLogEntry):
    """A log entry joined with its swimmer's display name."""
    first_name: str = ""
    last_name: str = ""


@dataclass
class SwimmerTotals:
    """One line of the ranking: a swimmer and what they have logged so far."""
    id: int
    first_name: str
    last_name: str
    share_number: Optional[int] = None
    total_meters: int = 0
    total_sessions: int = 0


@dataclass
class Summary:
    """
    Progress toward the goal across every swimmer.

    percentage is a fixed-point string with exactly two decimals and
    never exceeds "100.00", even once the goal has been passed.
    """
    goal: int
    total_meters: int
    percentage: str
    swimmer_count: int
    by_swimmer: list[SwimmerTotals] = field(default_factory=list)

    @property
    def remaining_meters(self) -> int:
        return max(self.goal - self.total_meters, 0)

    @property
    def is_complete(self) -> bool:
        return self.total_meters >= self.goal
