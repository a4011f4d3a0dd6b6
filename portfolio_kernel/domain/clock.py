"""
Clock -- injectable time source.

Responsibility:
    Aggregates take a Clock at construction and ask it for creation
    timestamps, note date stamps and "today" (creation-window and
    elapsed-period checks). Nothing else in the domain reads wall-clock
    time.

Architecture position:
    Kernel > Domain -- ``SystemClock`` is the only wall-clock read in the
    package; ``DeterministicClock`` keeps every time-dependent rule
    reproducible under test.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta

DEFAULT_TEST_TIME = datetime(2025, 1, 10, 12, 0, 0, tzinfo=UTC)


class Clock(ABC):
    """
    Time source for aggregates.

    Guarantees:
        - ``now()`` is timezone-aware.
        - ``today()`` is the UTC calendar date of ``now_utc()``, so date
          decisions do not depend on the host timezone.
    """

    @abstractmethod
    def now(self) -> datetime:
        ...

    def now_utc(self) -> datetime:
        return self.now().astimezone(UTC)

    def today(self) -> date:
        return self.now_utc().date()


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class DeterministicClock(Clock):
    """
    Manually driven clock for tests.

    Holds a single instant that only moves when told to: ``set_time``,
    ``advance``, ``advance_days`` or ``tick``.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or DEFAULT_TEST_TIME

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)

    def advance_days(self, days: int) -> None:
        self._current += timedelta(days=days)

    def tick(self) -> datetime:
        """Move forward one second and return the new instant."""
        self.advance(1)
        return self._current
