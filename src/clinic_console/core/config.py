"""
Configuration management for the clinic console client.
"""

import logging
from pathlib import Path
from typing import Optional, Literal
from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Clinic Console"
    version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Main backend (REST API)
    api_base_url: str = Field("http://localhost:5001/api", alias="CLINIC_API_URL")
    api_timeout: float = Field(30.0, alias="API_TIMEOUT")

    # WhatsApp gateway
    whatsapp_api_url: str = Field("https://whatsapp.aviawellness.com", alias="WHATSAPP_API_URL")
    whatsapp_timeout: float = Field(
        60.0,
        alias="WHATSAPP_TIMEOUT",
        description="Longer than the API timeout, QR generation can be slow"
    )
    whatsapp_poll_interval: float = Field(
        3.0,
        alias="WHATSAPP_POLL_INTERVAL",
        description="Seconds between session status checks while waiting for a QR scan"
    )
    whatsapp_poll_timeout: float = Field(
        120.0,
        alias="WHATSAPP_POLL_TIMEOUT",
        description="Give up waiting for a QR scan after this many seconds"
    )

    # Credential storage
    credential_backend: Literal["memory", "file", "redis"] = Field("file", alias="CREDENTIAL_BACKEND")
    credential_file: str = Field(
        str(Path.home() / ".clinic_console" / "credentials.json"),
        alias="CREDENTIAL_FILE"
    )
    redis_url: str = Field("redis://localhost:6379", alias="REDIS_URL")
    redis_key_prefix: str = "clinic_console:"

    # Inventory
    expiring_days_default: int = 90

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"  # Ignore extra environment variables

    def get_log_level(self) -> int:
        """Resolve the configured log level name, falling back to INFO."""
        level = logging.getLevelName(self.log_level.upper())
        if isinstance(level, int):
            return level
        logger.warning(f"Unknown LOG_LEVEL '{self.log_level}', using INFO")
        return logging.INFO

    def validate_on_startup(self):
        """Warn about settings that are likely wrong in production."""
        if self.environment == "production":
            if self.api_base_url.startswith("http://localhost"):
                logger.warning("⚠️  CLINIC_API_URL points at localhost in production")
            if self.credential_backend == "memory":
                logger.warning("⚠️  In-memory credential backend loses sessions between runs")
        if self.whatsapp_poll_interval <= 0:
            raise ValueError("WHATSAPP_POLL_INTERVAL must be positive")
        if self.whatsapp_poll_timeout < self.whatsapp_poll_interval:
            raise ValueError("WHATSAPP_POLL_TIMEOUT must be at least one poll interval")


# Global settings instance
settings = Settings()
