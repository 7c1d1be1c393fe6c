"""
Configuration management for the location data-quality pipeline.

Uses pydantic-settings for type-safe configuration with environment variable support.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from location_pipeline.exceptions import ConfigurationError


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="POSTGRES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    user: str = "koku"
    password: str = ""  # Required unless DATABASE_URL is set
    host: str = "localhost"
    port: int = 5432
    db: str = "koku"

    # Full URL (e.g. a hosted Postgres connection string) takes precedence
    url_override: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    @property
    def url(self) -> str:
        """Construct database URL.

        Raises:
            ConfigurationError: if neither DATABASE_URL nor POSTGRES_PASSWORD is set
        """
        if self.url_override:
            return self.url_override
        if not self.password:
            raise ConfigurationError(
                "Missing database credentials. Set DATABASE_URL or POSTGRES_PASSWORD in .env"
            )
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"


class PipelineSettings(BaseSettings):
    """Batch job settings."""

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # Output artifacts (JSON reports, change scripts)
    report_dir: Path = Field(default=Path("./reports"))

    # Processing settings
    page_size: int = 1000
    similarity_threshold: float = 0.80


class Settings(BaseSettings):
    """Main settings class that combines all settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.
    """
    return Settings()
