"""QueuePeek configuration with sensible defaults for development."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    QueuePeek configuration.

    All settings can be overridden via environment variables with QUEUEPEEK_ prefix.
    Defaults are set for local development - no configuration needed to get started.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUEUEPEEK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    log_format: Literal["text", "json"] = "text"

    # Redis URL for the stream-backed peek source
    redis_url: str = "redis://localhost:6379"
    key_prefix: str = "queuepeek"

    # Largest batch a single peek call may request
    peek_batch_size: int = 250

    # Count fallback controls (0 disables the ceiling)
    count_ceiling: int = 1_000_000
    count_progress_interval: int = 10_000
    runtime_properties_enabled: bool = True

    # Paging controls
    default_page_size: int = 50
    max_page_size: int = 500

    def resolved_count_ceiling(self) -> int:
        """Resolve the exhaustive-count ceiling, 0 meaning unlimited."""
        return max(0, self.count_ceiling)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
