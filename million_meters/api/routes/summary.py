"""
Goal progress endpoint.

Everything is recomputed from the full log on every request.
"""

from typing import Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import MeterTrackerDep

router = APIRouter()


class SwimmerRanking(BaseModel):
    """One swimmer's line in the ranking."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    share_number: Optional[int] = None
    total_meters: int
    total_sessions: int


class SummaryResponse(BaseModel):
    """Progress toward the shared goal."""
    model_config = ConfigDict(from_attributes=True)

    goal: int = Field(description="Target distance in meters")
    total_meters: int = Field(description="Meters logged by everyone")
    percentage: str = Field(description="Percent of the goal, two decimals, capped at 100.00")
    remaining_meters: int = Field(description="Meters still to swim, never negative")
    swimmer_count: int = Field(description="Registered swimmers, including those with no entries")
    by_swimmer: list[SwimmerRanking] = Field(description="Swimmers by total meters, highest first")


@router.get(
    "",
    response_model=SummaryResponse,
    status_code=status.HTTP_200_OK,
    summary="Goal progress",
    description="Totals, ranking and percentage of the 1,000,000 m goal",
)
def get_summary(tracker: MeterTrackerDep) -> SummaryResponse:
    return SummaryResponse.model_validate(tracker.compute_summary())
