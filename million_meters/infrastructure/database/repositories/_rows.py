"""
Row value normalization and exact meter sums.

SQLite hands back dates and timestamps as text and may return a migrated
share_number as text (the column kept its old TEXT affinity); psycopg2
returns native date/datetime objects. Everything is normalized here so
the domain models always carry the same types.
"""

from datetime import date, datetime
from typing import Any, Optional


def to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def to_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


# Meters are summed as two halves split at 2**32: each partial sum stays
# inside 64-bit integer arithmetic on both backends however large the
# stored values are, and Python joins them without overflow.
SUM_SPLIT = 2 ** 32


def split_sum(column: str, alias: str) -> str:
    """SELECT fragment producing <alias>_high and <alias>_low partial sums."""
    high = f"{column} / {SUM_SPLIT}"
    return (
        f"COALESCE(SUM({high}), 0) AS {alias}_high, "
        f"COALESCE(SUM({column} - ({high}) * {SUM_SPLIT}), 0) AS {alias}_low"
    )


def joined_sum(row: dict, alias: str) -> int:
    return int(row[f"{alias}_high"]) * SUM_SPLIT + int(row[f"{alias}_low"])
