"""
Input validation for swimmer and meter-log writes.

Every write passes through here before it reaches storage. The error
classes double as user-facing categories: the API layer turns any
ValidationError into a 400 with the error's message.

Swimmer existence is deliberately not checked when logging meters. The
foreign key on meters_log rejects unknown ids at insert time, which
avoids a check-then-insert race with a concurrent delete.
"""

from datetime import date, datetime
from typing import Any, Optional

from .models import (
    SHARE_NUMBER_MAX,
    SHARE_NUMBER_MIN,
    MeterEntryInput,
    SwimmerInput,
)


class ValidationError(ValueError):
    """Base class for rejected input."""
    pass


class MissingFieldError(ValidationError):
    """A required field is absent or blank."""

    def __init__(self, message: str, fields: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class OutOfRangeError(ValidationError):
    """share_number is not an integer in [1, 999]."""
    pass


class InvalidSwimmerIdError(ValidationError):
    """swimmer_id is present but not a positive integer."""
    pass


class InvalidMetersError(ValidationError):
    """meters is not a positive integer."""
    pass


class InvalidSessionDateError(ValidationError):
    """session_date is not a calendar date."""
    pass


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _as_int(value: Any) -> Optional[int]:
    """
    Interpret value as an integer, or return None if it isn't one.

    Accepts ints, integral floats and integer strings ("42", " 7 ").
    Booleans are rejected even though bool subclasses int.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _clean_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip()


def validate_swimmer_input(
    first_name: Any,
    last_name: Any,
    share_number: Any = None,
) -> SwimmerInput:
    """
    Validate the fields of a new swimmer.

    Names are stripped and must be non-empty. An absent or blank
    share_number becomes None, never zero.

    Raises:
        MissingFieldError: first or last name missing
        OutOfRangeError: share_number present but not an integer in [1, 999]
    """
    missing = [
        name for name, value in (("first_name", first_name), ("last_name", last_name))
        if _is_blank(value)
    ]
    if missing:
        raise MissingFieldError("First name and last name are required", missing)

    normalized_share: Optional[int] = None
    if not _is_blank(share_number):
        normalized_share = _as_int(share_number)
        if (
            normalized_share is None
            or normalized_share < SHARE_NUMBER_MIN
            or normalized_share > SHARE_NUMBER_MAX
        ):
            raise OutOfRangeError(
                f"Share number must be an integer between "
                f"{SHARE_NUMBER_MIN} and {SHARE_NUMBER_MAX}"
            )

    return SwimmerInput(
        first_name=str(first_name).strip(),
        last_name=str(last_name).strip(),
        share_number=normalized_share,
    )


def validate_meter_entry_input(
    swimmer_id: Any,
    meters: Any,
    session_date: Any,
    notes: Any = None,
) -> MeterEntryInput:
    """
    Validate the fields of a new meter-log entry.

    Raises:
        MissingFieldError: swimmer_id, meters or session_date missing
        InvalidSwimmerIdError: swimmer_id is not a positive integer
        InvalidMetersError: meters is not an integer greater than zero
        InvalidSessionDateError: session_date is not YYYY-MM-DD
    """
    missing = [
        name
        for name, value in (
            ("swimmer_id", swimmer_id),
            ("meters", meters),
            ("session_date", session_date),
        )
        if _is_blank(value)
    ]
    if missing:
        raise MissingFieldError("Swimmer, meters and date are required", missing)

    parsed_swimmer_id = _as_int(swimmer_id)
    if parsed_swimmer_id is None or parsed_swimmer_id <= 0:
        raise InvalidSwimmerIdError("Swimmer id must be a positive integer")

    parsed_meters = _as_int(meters)
    if parsed_meters is None or parsed_meters <= 0:
        raise InvalidMetersError("Meters must be greater than 0")

    parsed_date = _as_date(session_date)
    if parsed_date is None:
        raise InvalidSessionDateError("Session date must be a valid date (YYYY-MM-DD)")

    return MeterEntryInput(
        swimmer_id=parsed_swimmer_id,
        meters=parsed_meters,
        session_date=parsed_date,
        notes=_clean_text(notes),
    )
