"""
Clock -- Deterministic calendar abstraction.

Responsibility:
    Provides an injectable clock interface so that engine and service code
    never call ``date.today()`` or ``datetime.now()`` directly.  Billing
    runs and eligibility reviews receive "today" from a Clock instance.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Failure modes:
    - None; SystemClock reads the host clock and cannot fail.

Audit relevance:
    Every bill is computed relative to an ``as_of`` date.  A deterministic
    clock makes a billing run reproducible for any historical date.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timezone


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Services that need the current date receive a Clock instance via
        constructor injection.

    Guarantees:
        - ``today()`` returns the local calendar date.
        - ``now()`` returns a timezone-aware ``datetime``.
    """

    @abstractmethod
    def today(self) -> date:
        """Get the current local calendar date."""
        ...

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...


class SystemClock(Clock):
    """
    Production clock backed by the host's local calendar.

    Non-goals:
        Not suitable for deterministic replay or testing.
    """

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with a controlled date.

    Guarantees:
        - ``today()`` returns the same value on repeated calls until
          ``set_date()`` or ``advance_days()`` is called.
    """

    def __init__(self, fixed_date: date | None = None):
        self._fixed_date = fixed_date or date(2025, 6, 1)
        self._offset_days = 0

    def today(self) -> date:
        from datetime import timedelta

        return self._fixed_date + timedelta(days=self._offset_days)

    def now(self) -> datetime:
        return datetime.combine(self.today(), time(12, 0), tzinfo=timezone.utc)

    def set_date(self, fixed_date: date) -> None:
        """Set the clock to a specific date."""
        self._fixed_date = fixed_date
        self._offset_days = 0

    def advance_days(self, days: int = 1) -> None:
        """Advance the clock by the given number of days."""
        self._offset_days += days
