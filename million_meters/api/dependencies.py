"""
FastAPI dependency injection.

Dependencies provide the settings, the storage adapter and the tracking
service to route handlers. The adapter is built once by create_app() and
kept on app.state; nothing here holds module-level connection state, so
tests can hand any adapter to create_app().

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.tracking.service import MeterTracker
from ..infrastructure.database.base import Database
from ..infrastructure.database.repositories import (
    MeterLogRepository,
    SwimmerRepository,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application State
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """The storage adapter the application was created with."""
    return request.app.state.database


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_meter_tracker(
    database: Annotated[Database, Depends(get_database)],
) -> MeterTracker:
    """
    Provide a MeterTracker over the shared adapter.

    The tracker and its repositories are stateless, so a new instance
    per request costs nothing and keeps requests independent.
    """
    tracker = MeterTracker(
        swimmers=SwimmerRepository(database),
        meter_log=MeterLogRepository(database),
    )
    logger.debug("Created MeterTracker instance")
    return tracker


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]
MeterTrackerDep = Annotated[MeterTracker, Depends(get_meter_tracker)]
