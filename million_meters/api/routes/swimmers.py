"""
Swimmer endpoints.

Registering, listing and removing swimmers. Removing a swimmer also
removes every meter entry they logged.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import MeterTrackerDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class SwimmerCreateRequest(BaseModel):
    """
    Request to register a swimmer.

    Fields are loosely typed on purpose: the tracking service owns the
    validation rules and reports them with its own error categories.
    """
    first_name: Optional[str] = Field(None, description="Swimmer's first name")
    last_name: Optional[str] = Field(None, description="Swimmer's last name")
    share_number: Optional[Any] = Field(
        None,
        description="Optional share number between 1 and 999",
        json_schema_extra={"type": "integer", "minimum": 1, "maximum": 999},
    )


class SwimmerResponse(BaseModel):
    """A registered swimmer."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Swimmer identifier")
    first_name: str
    last_name: str
    share_number: Optional[int] = Field(None, description="Share number, if assigned")
    created_at: Optional[datetime] = Field(None, description="When the swimmer was registered")


class SwimmerDeletedResponse(BaseModel):
    """Confirmation of a deletion."""
    id: int
    deleted: bool = True


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[SwimmerResponse],
    status_code=status.HTTP_200_OK,
    summary="List swimmers",
    description="All swimmers ordered by last name, then first name",
)
def list_swimmers(tracker: MeterTrackerDep) -> list[SwimmerResponse]:
    swimmers = tracker.list_swimmers()
    logger.debug("Listed swimmers", extra={"count": len(swimmers)})
    return [SwimmerResponse.model_validate(s) for s in swimmers]


@router.post(
    "",
    response_model=SwimmerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a swimmer",
    responses={400: {"description": "Missing name or share number out of range"}},
)
def create_swimmer(
    request: SwimmerCreateRequest,
    tracker: MeterTrackerDep,
) -> SwimmerResponse:
    swimmer = tracker.create_swimmer(
        first_name=request.first_name,
        last_name=request.last_name,
        share_number=request.share_number,
    )
    return SwimmerResponse.model_validate(swimmer)


@router.delete(
    "/{swimmer_id}",
    response_model=SwimmerDeletedResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a swimmer",
    description="Removes the swimmer and every meter entry they logged",
    responses={404: {"description": "Swimmer not found"}},
)
def delete_swimmer(swimmer_id: int, tracker: MeterTrackerDep) -> SwimmerDeletedResponse:
    tracker.delete_swimmer(swimmer_id)
    return SwimmerDeletedResponse(id=swimmer_id)
