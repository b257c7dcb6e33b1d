from __future__ import annotations

from datetime import timedelta
from typing import Literal, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from meilidex.tasks import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "Meilidex"
    env: str = "development"
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class MeilisearchConfig(BaseModel):
    """Connection values for the search service."""

    url: str = "http://localhost:7700"
    api_key: Optional[str] = None
    timeout: float = 30.0
    verify_ssl: bool = True


class TasksConfig(BaseModel):
    """Polling cadence used when waiting for background tasks."""

    poll_interval: timedelta = DEFAULT_POLL_INTERVAL
    poll_timeout: timedelta = DEFAULT_POLL_TIMEOUT


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="MEILIDEX_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    meilisearch: MeilisearchConfig = MeilisearchConfig()
    tasks: TasksConfig = TasksConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]
