"""Application configuration using Pydantic Settings.

Environment variables are loaded from .env files and system environment.
The settings object is created once by the application factory and passed
explicitly to the components that need it (engine, token helpers, services).
"""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Workout Tracker API"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Any) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        return ["http://localhost:3000"]

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/workout_tracker"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_CREATE_TABLES: bool = True

    # Upper bound for a single store round-trip, in seconds
    STORE_TIMEOUT_SECONDS: float = 5.0

    # Security
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12
    PASSWORD_MIN_LENGTH: int = 6

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    LOG_JSON_FORMAT: bool = True
    LOG_SENSITIVE_FILTER: bool = True

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured store is SQLite (no connection pool sizing)."""
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Load settings from the environment.

    Only the application factory calls this; everything else receives the
    settings object it was built with.
    """
    return Settings()


__all__ = [
    "Settings",
    "get_settings",
]
