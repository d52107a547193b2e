"""
Swimmer and meter-log tracking logic.

Contains the domain models, input validation, the aggregation engine and
the tracking service that the API layer calls into.
"""

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
from .service import MeterTracker, SwimmerNotFoundError
from .summary import build_summary, progress_percentage, rank_swimmers
from .validation import (
    InvalidMetersError,
    InvalidSessionDateError,
    InvalidSwimmerIdError,
    MissingFieldError,
    OutOfRangeError,
    ValidationError,
    validate_meter_entry_input,
    validate_swimmer_input,
)

__all__ = [
    "GOAL_METERS",
    "MeterEntryInput",
    "MeterLogEntry",
    "MeterLogRow",
    "Summary",
    "Swimmer",
    "SwimmerInput",
    "SwimmerTotals",
    "MeterTracker",
    "SwimmerNotFoundError",
    "build_summary",
    "progress_percentage",
    "rank_swimmers",
    "InvalidMetersError",
    "InvalidSessionDateError",
    "InvalidSwimmerIdError",
    "MissingFieldError",
    "OutOfRangeError",
    "ValidationError",
    "validate_meter_entry_input",
    "validate_swimmer_input",
]
