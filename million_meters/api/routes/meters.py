"""
Meter log endpoints.

Each entry is one training session for one swimmer. Entries are
immutable once logged.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import MeterTrackerDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class MeterEntryCreateRequest(BaseModel):
    """Request to log meters for a swimmer."""
    swimmer_id: Optional[Any] = Field(
        None, description="Swimmer who swam", json_schema_extra={"type": "integer"}
    )
    meters: Optional[Any] = Field(
        None,
        description="Distance in meters, greater than 0",
        json_schema_extra={"type": "integer", "exclusiveMinimum": 0},
    )
    session_date: Optional[Any] = Field(
        None,
        description="Day of the session (YYYY-MM-DD)",
        json_schema_extra={"type": "string", "format": "date"},
    )
    notes: Optional[str] = Field(None, description="Free-text notes")


class MeterEntryResponse(BaseModel):
    """A logged entry."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    swimmer_id: int
    meters: int
    session_date: date
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class MeterLogItem(MeterEntryResponse):
    """A logged entry with the swimmer's name."""
    first_name: str
    last_name: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[MeterLogItem],
    status_code=status.HTTP_200_OK,
    summary="List the meter log",
    description="Every entry with swimmer names, most recent session first",
)
def list_meter_log(tracker: MeterTrackerDep) -> list[MeterLogItem]:
    rows = tracker.list_meter_log()
    return [MeterLogItem.model_validate(row) for row in rows]


@router.post(
    "",
    response_model=MeterEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log meters",
    responses={400: {"description": "Missing field, invalid meters or unknown swimmer"}},
)
def log_meters(
    request: MeterEntryCreateRequest,
    tracker: MeterTrackerDep,
) -> MeterEntryResponse:
    entry = tracker.log_meters(
        swimmer_id=request.swimmer_id,
        meters=request.meters,
        session_date=request.session_date,
        notes=request.notes,
    )
    return MeterEntryResponse.model_validate(entry)
