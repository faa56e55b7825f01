"""Injectable time source.

Services never call ``datetime.now()`` or ``date.today()`` directly; they
receive a Clock so that validation cut-offs, payroll periods, health windows
and trend windows can be pinned in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        ...

    def today(self) -> date:
        """Current calendar day."""
        return self.now().date()


class SystemClock(Clock):
    """Production clock returning actual system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock frozen at a given instant until moved explicitly."""

    def __init__(self, fixed_time: datetime | None = None):
        self._time = fixed_time or datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        if self._time.tzinfo is None:
            self._time = self._time.replace(tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._time

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._time = time if time.tzinfo else time.replace(tzinfo=timezone.utc)

    def advance(self, **kwargs: float) -> None:
        """Advance the clock; accepts ``timedelta`` keyword arguments."""
        self._time += timedelta(**kwargs)
