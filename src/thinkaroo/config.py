"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Validates fields and provides typed access to settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Storage:
        STORAGE_BACKEND: Object store backend (s3, disk, memory)
        KEYVALUE_BACKEND: Key/value store backend (dynamodb, memory)
        S3_BUCKET: Bucket holding generated content
        DYNAMODB_TABLE: Table backing the key/value store
        DISK_STORAGE_DIR: Root directory for the disk backend
        AWS_REGION / AWS_ENDPOINT_URL: Optional AWS client overrides

    Cache:
        CACHE_CAPACITY: Artifacts per hourly bucket before reads stop generating

    Generation:
        OPENAI_API_KEY: OpenAI API key (required only to generate content)
        PROMPTS_DIR: Directory of prompt TOML files (defaults to bundled prompts)

    Logging:
        LOG_LEVEL / LOG_FILE
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    STORAGE_BACKEND: Literal["s3", "disk", "memory"] = Field(
        default="disk", description="Object store backend"
    )
    KEYVALUE_BACKEND: Literal["dynamodb", "memory"] = Field(
        default="memory", description="Key/value store backend"
    )

    S3_BUCKET: str = Field(
        default="thinkaroo-reading-stories", description="S3 bucket for content objects"
    )
    DYNAMODB_TABLE: str = Field(
        default="thinkaroo-data", description="DynamoDB table for key/value records"
    )
    DISK_STORAGE_DIR: Path = Field(
        default=Path("./storage"), description="Base directory for disk storage"
    )
    AWS_REGION: str | None = Field(default=None, description="AWS region override")
    AWS_ENDPOINT_URL: str | None = Field(
        default=None, description="Custom endpoint (LocalStack, MinIO)"
    )

    CACHE_CAPACITY: int = Field(
        default=16, ge=1, description="Maximum artifacts generated per hourly bucket"
    )

    OPENAI_API_KEY: str | None = Field(default=None, description="OpenAI API key")
    PROMPTS_DIR: Path | None = Field(
        default=None, description="Directory of prompt TOML files"
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON log file path")

    @field_validator("S3_BUCKET", "DYNAMODB_TABLE")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty resource names."""
        if not v.strip():
            raise ValueError("Resource name must not be blank")
        return v.strip()

    @property
    def openai_api_key(self) -> str | None:
        """Get OpenAI API key (lowercase alias)."""
        return self.OPENAI_API_KEY or None

    def redacted_display(self) -> dict[str, str | int | None]:
        """Return settings with API keys redacted for display."""
        def redact(value: str | None) -> str | None:
            if not value:
                return None
            return f"{value[:8]}...{value[-4:]}" if len(value) > 12 else "***"

        return {
            "STORAGE_BACKEND": self.STORAGE_BACKEND,
            "KEYVALUE_BACKEND": self.KEYVALUE_BACKEND,
            "S3_BUCKET": self.S3_BUCKET,
            "DYNAMODB_TABLE": self.DYNAMODB_TABLE,
            "DISK_STORAGE_DIR": str(self.DISK_STORAGE_DIR),
            "AWS_REGION": self.AWS_REGION,
            "AWS_ENDPOINT_URL": self.AWS_ENDPOINT_URL,
            "CACHE_CAPACITY": self.CACHE_CAPACITY,
            "OPENAI_API_KEY": redact(self.OPENAI_API_KEY),
            "PROMPTS_DIR": str(self.PROMPTS_DIR) if self.PROMPTS_DIR else None,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
