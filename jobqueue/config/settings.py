from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: str = Field(default="development", description="Environment")
    debug: bool = Field(default=True, description="Debug mode")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: str | None = Field(
        default=None, description="Also write WARNING and above to this file"
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./jobqueue.db",
        description="Database connection URL",
    )
    db_pool_size: int = Field(default=10, description="Database connection pool size")
    db_max_overflow: int = Field(default=20, description="Database max overflow connections")
    db_pool_timeout: int = Field(default=30, description="Database pool timeout in seconds")
    db_pool_recycle: int = Field(default=3600, description="Database connection recycle time in seconds")
    db_busy_timeout: float = Field(
        default=5.0, description="SQLite lock wait in seconds"
    )

    # Queue module
    module_queue: bool = Field(
        default=False, description="Enable the background job queue"
    )
    queue_default_name: str = Field(
        default="default", min_length=1, description="Queue polled when none is given"
    )
    worker_sleep_seconds: float = Field(
        default=3, gt=0, description="Idle sleep between polls of an empty queue"
    )
    job_default_max_attempts: int = Field(
        default=3, ge=1, description="Attempts for jobs that do not declare their own"
    )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
