"""Configuration management for the payroll integration engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    time_source_url: str
    time_source_batch_size: int
    time_source_timeout: float
    sink_latency_seconds: float
    retry_latency_seconds: float
    sync_interval_seconds: float
    scheduler_enabled: bool
    host: str
    port: int
    debug: bool
    log_level: str

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./payroll_integration.db",
            ),
            time_source_url=os.getenv("TIME_SOURCE_URL", "https://dummyjson.com"),
            time_source_batch_size=int(os.getenv("TIME_SOURCE_BATCH_SIZE", "30")),
            time_source_timeout=float(os.getenv("TIME_SOURCE_TIMEOUT", "10")),
            sink_latency_seconds=float(os.getenv("SINK_LATENCY_SECONDS", "0.3")),
            retry_latency_seconds=float(os.getenv("RETRY_LATENCY_SECONDS", "0.2")),
            sync_interval_seconds=float(os.getenv("SYNC_INTERVAL_SECONDS", "600")),
            scheduler_enabled=os.getenv("SCHEDULER_ENABLED", "false").lower() == "true",
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
