"""
Aggregation engine: ranking and progress toward the goal.

Repositories hand over raw totals (the global sum and one row per
swimmer); everything that turns those numbers into the dashboard's
figures lives here so it can be tested without a database.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .models import Summary, SwimmerTotals


_HUNDRED = Decimal(100)
_TWO_PLACES = Decimal("0.01")


def progress_percentage(total_meters: int, goal: int) -> str:
    """
    Percentage of the goal reached, as a two-decimal string.

    Saturates at "100.00" once total_meters reaches the goal. Decimal
    arithmetic keeps the rounding exact (half-up) instead of inheriting
    binary float artifacts.
    """
    if goal <= 0:
        raise ValueError("Goal must be positive")
    if total_meters <= 0:
        return "0.00"

    ratio = min(Decimal(total_meters) / Decimal(goal) * _HUNDRED, _HUNDRED)
    return str(ratio.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def rank_swimmers(totals: Iterable[SwimmerTotals]) -> list[SwimmerTotals]:
    """Most meters first; equal totals fall back to swimmer id ascending."""
    return sorted(totals, key=lambda t: (-t.total_meters, t.id))


def build_summary(
    goal: int,
    total_meters: int,
    swimmer_totals: Iterable[SwimmerTotals],
) -> Summary:
    """
    Assemble the dashboard summary.

    swimmer_totals must contain every swimmer, including those with no
    entries (zero meters, zero sessions); swimmer_count is taken from it.
    """
    ranked = rank_swimmers(swimmer_totals)
    total = max(int(total_meters or 0), 0)

    return Summary(
        goal=goal,
        total_meters=total,
        percentage=progress_percentage(total, goal),
        swimmer_count=len(ranked),
        by_swimmer=ranked,
    )
