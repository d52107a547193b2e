"""
Application configuration using Pydantic settings.

Configuration comes from environment variables (or a .env file) with
defaults that run against a local SQLite file.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
