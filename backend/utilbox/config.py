"""
Utilbox Backend: Application Configuration
===========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py (server, CORS, logging) and the credential loader.
When:  Loaded once at module import time.

Environment variables (case-insensitive):
    PORT, HOST, CREDENTIALS_PATH, LOG_LEVEL,
    CORS_ORIGINS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS, CORS_ALLOW_CREDENTIALS
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults that reproduce the public behavior of the
    service: port 3000, permissive CORS, credentials read from
    ./data/users.csv relative to the working directory.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── Credential Store ──────────────────────────────────────────────────
    # What: Delimited text table with a `username,password` header row
    # When: Read exactly once, during application startup
    credentials_path: str = Field(
        default="./data/users.csv",
        description="Path to the username/password table loaded at startup",
    )

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated values (parsed by the properties below)
    cors_origins: str = Field(default="*")
    cors_allow_methods: str = Field(default="GET,POST,PUT,DELETE,OPTIONS")
    cors_allow_headers: str = Field(default="Content-Type,Authorization")
    cors_allow_credentials: bool = Field(default=False)

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS middleware expects a list, but env vars are strings."""
        return _split_csv(self.cors_origins)

    @property
    def cors_allow_methods_list(self) -> List[str]:
        return _split_csv(self.cors_allow_methods)

    @property
    def cors_allow_headers_list(self) -> List[str]:
        return _split_csv(self.cors_allow_headers)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
