# src/filestore_api/config/settings.py
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from filestore_api.config.settings import get_settings
        settings = get_settings()
        root = settings.storage_path
    """

    # Application Settings
    app_name: str = Field(
        default="file-storage-api",
        description="Application name"
    )

    # Storage Configuration
    storage_dir: str = Field(
        default="data-storage",
        description="Root directory holding the shard directories"
    )

    # Listing Configuration
    default_page_size: int = Field(
        default=10,
        ge=0,
        description="Page size used by search when the client sends none"
    )

    max_page_size: int = Field(
        default=1000,
        ge=1,
        description="Largest page size accepted by the search endpoint"
    )

    count_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Threads used to count matches across shards (None lets the executor decide)"
    )

    # HTTP Configuration
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and validate the logging level name."""
        level = str(v).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {v}")
        return level

    @property
    def storage_path(self) -> Path:
        return Path(self.storage_dir)

    def get_environment_dict(self) -> Dict[str, Any]:
        """Get configuration as a dictionary of environment variable names to values."""
        return {
            "APP_NAME": self.app_name,
            "STORAGE_DIR": self.storage_dir,
            "DEFAULT_PAGE_SIZE": self.default_page_size,
            "MAX_PAGE_SIZE": self.max_page_size,
            "COUNT_WORKERS": self.count_workers or "",
            "CORS_ALLOW_ORIGINS": ",".join(self.cors_allow_origins),
            "LOG_LEVEL": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
