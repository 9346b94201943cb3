# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.subscribers_path)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_ALPHA_ORIGIN = "http://localhost:4000"

_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_origin(raw: str | None) -> str:
    """
    Reduce a URL to its origin (scheme://host[:port]).

    A value without a scheme is assumed to be https. Empty or unparsable
    values fall back to DEFAULT_ALPHA_ORIGIN.

    Example:
        normalize_origin("alpha.example.com/x")  # "https://alpha.example.com"
    """
    value = (raw or "").strip()
    if not value:
        return DEFAULT_ALPHA_ORIGIN

    if not _SCHEME_PATTERN.match(value):
        value = "https://" + value

    try:
        parts = urlsplit(value)
        # Accessing .port validates it
        parts.port
    except ValueError as e:
        logger.error(f"Invalid ALPHA_ORIGIN, using default: {raw} ({e})")
        return DEFAULT_ALPHA_ORIGIN

    if not parts.hostname:
        logger.error(f"Invalid ALPHA_ORIGIN, using default: {raw}")
        return DEFAULT_ALPHA_ORIGIN

    return f"{parts.scheme.lower()}://{parts.netloc.rsplit('@', 1)[-1].lower()}"


def normalize_base_path(raw: str | None) -> str:
    """
    Normalize a mount path: leading slash, no trailing slash, "" for root.

    Example:
        normalize_base_path("alpha/")  # "/alpha"
        normalize_base_path("/")       # ""
    """
    value = (raw or "").strip()
    if not value:
        return ""
    if not value.startswith("/"):
        value = "/" + value
    return value.rstrip("/")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )

    PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Static Site
    # -------------------------------------------------------------------------

    STATIC_DIR: Path = Field(
        default=Path("public"),
        description="Directory the landing page is served from"
    )

    # -------------------------------------------------------------------------
    # Subscriber Store
    # -------------------------------------------------------------------------

    DATA_DIR: Path = Field(
        default=Path("data"),
        description="Directory holding the subscriber store file"
    )

    SUBSCRIBERS_FILE: str = Field(
        default="subscribers.json",
        min_length=1,
        description="Subscriber store filename inside DATA_DIR"
    )

    MAX_BODY_SIZE_BYTES: int = Field(
        default=1_000_000,
        ge=1,
        description="Largest accepted request body for POST /subscribe"
    )

    # -------------------------------------------------------------------------
    # Alpha Redirect
    # -------------------------------------------------------------------------
    # /alpha/* requests are redirected to the alpha application

    ALPHA_ORIGIN: str = Field(
        default=DEFAULT_ALPHA_ORIGIN,
        description="Origin of the alpha app (scheme added and path dropped if needed)"
    )

    ALPHA_BASE_PATH: str = Field(
        default="/alpha",
        description="Path the alpha app is mounted at on ALPHA_ORIGIN ('/' for root)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (useful for production where
        # env vars are set directly)
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("ALPHA_ORIGIN")
    @classmethod
    def validate_alpha_origin(cls, v: str) -> str:
        return normalize_origin(v)

    @field_validator("ALPHA_BASE_PATH")
    @classmethod
    def validate_alpha_base_path(cls, v: str) -> str:
        return normalize_base_path(v)

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Handles comma-separated values and strips whitespace.
        Example: "http://localhost:3000, https://nafez.app" -> ["http://localhost:3000", "https://nafez.app"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def subscribers_path(self) -> Path:
        """Full path of the subscriber store file."""
        return self.DATA_DIR / self.SUBSCRIBERS_FILE

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
