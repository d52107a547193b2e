"""
Repository pattern implementations.

Repositories translate between domain models and database rows. The SQL
is shared by both backends.
"""

from .meter_log import MeterLogRepository
from .swimmers import SwimmerRepository

__all__ = ["MeterLogRepository", "SwimmerRepository"]
