"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

The embedded SQLite backend needs no configuration at all; the PostgreSQL
backend reads DATABASE_URL and falls back to an unencrypted local server.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import parse_qs, urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOCAL_POSTGRES_DSN = "postgresql://postgres@localhost:5432/swimming"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Million Meters API"
    api_version: str = "v1"
    host: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn binds to"
    )
    port: int = Field(
        default=3000,
        description="HTTP port (PORT)"
    )

    # Storage
    storage_backend: Literal["sqlite", "postgres"] = Field(
        default="sqlite",
        description="Embedded SQLite file or networked PostgreSQL server"
    )
    database_path: str = Field(
        default="data/swimming.db",
        description="SQLite database file, or :memory: for a throwaway database"
    )
    database_url: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection string (DATABASE_URL). Unset means local server without TLS."
    )
    database_pool_size: int = Field(
        default=5,
        ge=1,
        description="Maximum pooled PostgreSQL connections"
    )
    database_connect_timeout: int = Field(
        default=10,
        ge=1,
        description="Seconds to wait for a PostgreSQL connection"
    )

    # Static dashboard shell
    static_dir: str = Field(
        default=str(Path(__file__).resolve().parent.parent / "static"),
        description="Directory holding index.html and its assets"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def postgres_dsn(self) -> str:
        """
        Connection string for the PostgreSQL backend.

        A configured DATABASE_URL is a hosted server, so TLS is required
        unless the URL already says otherwise. Without one we talk to a
        local server in plain text.
        """
        if not self.database_url:
            return f"{LOCAL_POSTGRES_DSN}?sslmode=disable"

        query = parse_qs(urlsplit(self.database_url).query)
        if "sslmode" in query:
            return self.database_url
        separator = "&" if "?" in self.database_url else "?"
        return f"{self.database_url}{separator}sslmode=require"

    def validate_required_fields(self) -> list[str]:
        """
        Report configuration that is missing for the selected backend.

        Returns list of missing required fields.
        """
        missing = []

        if self.storage_backend == "sqlite" and not self.database_path:
            missing.append("DATABASE_PATH")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
