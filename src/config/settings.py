"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server configuration
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "info"

    # Storage
    data_file: str = "data.json"  # User record document
    error_log_file: str = "errors.log"  # Append-only failure log

    # Alerting
    sendgrid_api_key: str | None = None  # Console alerts when unset
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    alert_to: str = "alerts@example.com"
    alert_from: str = "alerts@example.com"
    alert_subject: str = "You Experienced an Error"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
