"""
Million Meters - a shared swimming challenge tracker.

This package contains the complete application:
- core: Framework-agnostic business logic (validation, ranking, progress)
- infrastructure: SQLite / PostgreSQL storage
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
