"""
Configuration settings for the quizmark service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="QUIZMARK_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level for the API and CLI",
    )

    # ========================================
    # API
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="Host the HTTP API binds to",
    )
    api_port: int = Field(
        default=8100,
        description="Port the HTTP API listens on",
    )

    # ========================================
    # Limits
    # ========================================
    max_document_bytes: int = Field(
        default=1_048_576,
        ge=1,
        description="Largest token document accepted by the CLI and API (bytes)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
