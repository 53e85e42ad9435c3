"""Application configuration module.

This module contains settings for the SnapLink service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import string
from typing import Optional, List, Union
from enum import Enum
import logging

from pydantic import field_validator, computed_field, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "change_this_to_a_secure_random_string_in_production"


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "SnapLink"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "URL shortening service with per-visit analytics"

    # API Configuration
    BASE_URL: str = "http://localhost:8000"  # Used for generating short URLs
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Short code generation
    URL_CODE_LENGTH: int = 6
    URL_CODE_CHARS: str = string.ascii_letters + string.digits
    URL_CODE_MAX_ATTEMPTS: int = 10  # Collisions tolerated before giving up
    DEFAULT_TOPIC: str = "general"

    # Per-link analytics only reports clicks by date for this trailing window
    ANALYTICS_RECENT_DAYS: int = 7

    # PostgreSQL settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "snaplink"
    DATABASE_URL: Optional[str] = None  # Full SQLAlchemy URL, overrides the parts above

    # PostgreSQL pool settings
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True  # Run metadata.create_all on startup

    # Redis settings
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str = ""
    REDIS_DB: int = 0
    REDIS_URL: Optional[str] = None  # Full Redis URL, overrides the parts above

    # Link creation rate limiting (per authenticated user)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_SHORTEN_MAX: int = 5
    RATE_LIMIT_SHORTEN_WINDOW_SECONDS: int = 3600
    RATE_LIMIT_KEY_PREFIX: str = "ratelimit:shorten"

    # Rate limiting backend resilience configuration
    RATE_LIMIT_REDIS_CHECK_INTERVAL: int = 10  # Seconds between Redis health checks
    RATE_LIMIT_REDIS_MAX_ERRORS: int = 3  # Max Redis errors before switching to memory backend

    # Security
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days
    GOOGLE_CLIENT_ID: str = ""

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"
    LOG_JSON: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    @field_validator("SECRET_KEY")
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        env_value = info.data.get("ENVIRONMENT", EnvironmentType.DEVELOPMENT)
        if v == DEFAULT_SECRET_KEY and env_value == EnvironmentType.PRODUCTION:
            # Only warn during validation, don't block startup
            logger.warning("Using default SECRET_KEY in production environment! Session tokens can be forged.")
        return v

    @field_validator("CORS_ORIGINS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("BASE_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the SQLAlchemy database URI from settings or use override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @computed_field
    def REDIS_URI(self) -> str:
        """Construct the Redis URI from settings or use override."""
        if self.REDIS_URL:
            return self.REDIS_URL
        password_part = f":{self.REDIS_PASSWORD}@" if self.REDIS_PASSWORD else ""
        return f"redis://{password_part}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"


# Create a singleton instance of the settings
settings = Settings()
