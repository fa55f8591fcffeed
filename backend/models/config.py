import os
import sys
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    For local development, load `.env` automatically so `SECRET_KEY` can be
    provided from `backend/.env`. Do NOT auto-load `.env` when running under
    pytest or in CI so tests that validate missing secrets fail fast.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'staging', 'production' or 'test'",
    )

    DATABASE_URL: str = "sqlite:///./data/ideastats.db"
    SECRET_KEY: str = Field(
        ...,  # Required, no default
        description="JWT secret key - must be set via SECRET_KEY environment variable",
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Admin credentials for initial setup (used by init_db.py)
    ADMIN_EMAIL: str = Field(
        ...,
        description="Admin email - must be set via ADMIN_EMAIL environment variable",
    )
    ADMIN_PASSWORD: str = Field(
        ...,
        description="Admin password - must be set via ADMIN_PASSWORD environment variable",
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(
        default=5,
        description="Number of persistent connections in pool",
    )
    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Extra connections when pool exhausted",
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        description="Seconds to wait for connection from pool",
    )
    DB_POOL_RECYCLE: int = Field(
        default=1800,
        description="Recycle connections after N seconds (30 min default)",
    )

    # Safety: avoid creating DB schema automatically unless explicitly enabled.
    AUTO_CREATE_DB: bool = Field(
        default=False,
        description="When true (development only), call Base.metadata.create_all on startup",
    )

    # Performance settings
    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    # Platform configuration path (timezone, launch date, locales)
    PLATFORM_CONFIG_PATH: str = Field(
        default="./config/platform.config.json",
        description="Path to platform configuration file for instance customization.",
    )

    # Statistics settings
    STATS_STREAM_BATCH_SIZE: int = Field(
        default=1000,
        ge=1,
        description="Rows fetched per round-trip when streaming ideas for grouping",
    )
    STATS_EXPORT_RATE_LIMIT: str = Field(
        default="30/minute",
        description="slowapi rate limit applied to spreadsheet export endpoints",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str) and not v.startswith("["):
            return [origin.strip() for origin in v.split(",")]
        return v

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


# Instantiating Settings() raises pydantic.ValidationError if SECRET_KEY isn't set.
settings = Settings()  # type: ignore[call-arg]
