"""Tests for settings, the clock and logging setup."""

import logging
from datetime import datetime, timezone

import pytest

from payroll_integration.clock import FixedClock, SystemClock
from payroll_integration.config import Settings
from payroll_integration.logging_config import configure_logging

SETTINGS_ENV = (
    "DATABASE_URL",
    "TIME_SOURCE_URL",
    "TIME_SOURCE_BATCH_SIZE",
    "SYNC_INTERVAL_SECONDS",
    "SCHEDULER_ENABLED",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.time_source_batch_size == 30
        assert settings.sync_interval_seconds == 600
        assert settings.scheduler_enabled is False
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql+asyncpg://payroll@db/payroll")
        clean_env.setenv("TIME_SOURCE_BATCH_SIZE", "10")
        clean_env.setenv("SYNC_INTERVAL_SECONDS", "60")
        clean_env.setenv("SCHEDULER_ENABLED", "TRUE")
        clean_env.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.database_url == "postgresql+asyncpg://payroll@db/payroll"
        assert settings.time_source_batch_size == 10
        assert settings.sync_interval_seconds == 60
        assert settings.scheduler_enabled is True
        assert settings.log_level == "DEBUG"

    def test_settings_are_frozen(self, clean_env):
        settings = Settings.from_env()

        with pytest.raises(AttributeError):
            settings.port = 9000


class TestClock:
    def test_fixed_clock_naive_time_is_utc(self):
        clock = FixedClock(datetime(2026, 3, 1, 8, 30))

        assert clock.now().tzinfo is timezone.utc
        assert clock.today().isoformat() == "2026-03-01"

    def test_fixed_clock_advance_and_set(self):
        clock = FixedClock(datetime(2026, 3, 1, 23, 0, tzinfo=timezone.utc))

        clock.advance(hours=2)
        assert clock.today().isoformat() == "2026-03-02"

        clock.set_time(datetime(2025, 12, 31, 0, 0))
        assert clock.now() == datetime(2025, 12, 31, tzinfo=timezone.utc)

    def test_system_clock_is_aware(self):
        assert SystemClock().now().tzinfo is not None


class TestLogging:
    def test_configure_logging_does_not_stack_handlers(self):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            configure_logging("DEBUG")
            configure_logging("WARNING")

            ours = [h for h in root.handlers if getattr(h, "_payroll_integration", False)]
            assert len(ours) == 1
            assert root.level == logging.WARNING
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            for handler in list(root.handlers):
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)
