# feedkeeper/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate all environment variables at startup.
Fail fast with clear error messages if a value is out of range.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Feed
    FEED_URL: str = Field(
        default="https://gome.at/feed",
        description="URL of the single RSS/Atom feed to ingest",
    )
    FETCH_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="HTTP timeout for the feed fetch",
    )
    USER_AGENT: str = Field(
        default="feedkeeper/1.0",
        description="User-Agent header sent with the feed fetch",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite:///./feedkeeper.db",
        description="SQLAlchemy connection URL for the entry store",
    )

    # Scheduler
    CHECK_INTERVAL_SECONDS: int = Field(
        default=60 * 30,
        description="Seconds between periodic feed checks",
    )
    CHECK_ON_STARTUP: bool = Field(
        default=True,
        description="Run the first periodic check immediately instead of after one interval",
    )
    SCHEDULER_ENABLED: bool = Field(
        default=True,
        description="Start the periodic checker together with the API",
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit single-line JSON logs instead of plain text",
    )
    LOG_FILE: str = Field(
        default="backend.log",
        description="Also write logs to this file. Empty = console only.",
    )

    # API server (CLI serve command)
    API_HOST: str = Field(default="127.0.0.1", description="Bind address for `feed serve`")
    API_PORT: int = Field(default=8080, description="Bind port for `feed serve`")

    @field_validator("DATABASE_URL")
    @classmethod
    def fix_database_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but SQLAlchemy needs postgresql+psycopg2://"""
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    @field_validator("CHECK_INTERVAL_SECONDS", "FETCH_TIMEOUT_SECONDS")
    @classmethod
    def must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level '{v}'")
        return level

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()
