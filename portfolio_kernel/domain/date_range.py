"""
DateRange -- Immutable inclusive calendar-date interval.

Responsibility:
    Interval algebra over closed date ranges ``[start, end]``: containment,
    overlap, intersection, adjacency, bounding union, translation, and
    weekday/weekend enumeration. Used by resource allocations for
    capacity windows and effort calculations.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O. Relative checks
    ("has it ended?") take ``today`` as an argument; callers supply it
    from an injected Clock.

Invariants enforced:
    - Both endpoints are plain dates (datetimes are truncated).
    - ``start <= end`` at construction.
    - Every transformation returns a new instance.

Failure modes:
    - InvalidDateRangeError when start > end or a duration is negative.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from portfolio_kernel.exceptions import InvalidDateRangeError

_ONE_DAY = timedelta(days=1)
_WEEKEND = (5, 6)  # Saturday, Sunday


def _as_date(value: date) -> date:
    # datetime is a date subclass; keep calendar-date granularity only
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True, slots=True)
class DateRange:
    """
    Closed interval of calendar dates.

    Contract:
        ``start`` and ``end`` are both included. A single-day range has
        ``start == end``.

    Guarantees:
        - Immutable and hashable; equality is structural.
        - ``start <= end``.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        start = _as_date(self.start)
        end = _as_date(self.end)
        if start > end:
            raise InvalidDateRangeError(
                "Start date cannot be later than end date.", start=start, end=end
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    # -- Factories ----------------------------------------------------------

    @classmethod
    def from_duration(cls, start: date, duration: int | timedelta) -> DateRange:
        """Create a range spanning ``duration`` days after ``start``."""
        if isinstance(duration, int):
            duration = timedelta(days=duration)
        if duration < timedelta(0):
            raise InvalidDateRangeError("Duration cannot be negative.", start=start)
        start = _as_date(start)
        return cls(start, start + timedelta(days=duration.days))

    @classmethod
    def single_day(cls, day: date) -> DateRange:
        return cls(day, day)

    @classmethod
    def week(cls, start_of_week: date) -> DateRange:
        """Seven consecutive days starting at ``start_of_week``."""
        return cls(start_of_week, _as_date(start_of_week) + timedelta(days=6))

    @classmethod
    def month(cls, year: int, month: int) -> DateRange:
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def year(cls, year: int) -> DateRange:
        return cls(date(year, 1, 1), date(year, 12, 31))

    # -- Derived values -----------------------------------------------------

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_days(self) -> int:
        """Exclusive span ``end - start`` in days (0 for a single day)."""
        return (self.end - self.start).days

    @property
    def duration_inclusive_days(self) -> int:
        """Number of calendar days covered, counting both endpoints."""
        return self.duration_days + 1

    @property
    def is_single_day(self) -> bool:
        return self.start == self.end

    @property
    def midpoint(self) -> date:
        return self.start + timedelta(days=self.duration_days // 2)

    # -- Relative checks ----------------------------------------------------

    def is_in_past(self, today: date) -> bool:
        return self.end < today

    def is_in_future(self, today: date) -> bool:
        return self.start > today

    def is_current(self, today: date) -> bool:
        return self.contains(today)

    def has_started(self, today: date) -> bool:
        return self.start <= today

    def has_ended(self, today: date) -> bool:
        return self.end < today

    # -- Interval algebra ---------------------------------------------------

    def contains(self, other: date | DateRange) -> bool:
        """
        Inclusive containment of a date, or of a whole range.

        A range contains another when it starts no later and ends no
        earlier.
        """
        if isinstance(other, DateRange):
            return self.start <= other.start and self.end >= other.end
        day = _as_date(other)
        return self.start <= day <= self.end

    def overlaps(self, other: DateRange) -> bool:
        return self.start <= other.end and other.start <= self.end

    def is_adjacent(self, other: DateRange) -> bool:
        """True when one range ends the day before the other starts."""
        return (
            self.end + _ONE_DAY == other.start
            or other.end + _ONE_DAY == self.start
        )

    def get_overlap(self, other: DateRange) -> DateRange | None:
        """Intersection of both ranges, or None when they do not overlap."""
        if not self.overlaps(other):
            return None
        return DateRange(max(self.start, other.start), min(self.end, other.end))

    def extend(self, days: int) -> DateRange:
        """Positive ``days`` moves the end forward; negative moves the start back."""
        if days >= 0:
            return DateRange(self.start, self.end + timedelta(days=days))
        return DateRange(self.start + timedelta(days=days), self.end)

    def extend_to_include(self, other: date | DateRange) -> DateRange:
        """
        Bounding union with a date or another range.

        This is a bounding box, not a set union: any gap between two
        disjoint ranges is closed.
        """
        if isinstance(other, DateRange):
            return DateRange(min(self.start, other.start), max(self.end, other.end))
        day = _as_date(other)
        if self.contains(day):
            return self
        return DateRange(min(self.start, day), max(self.end, day))

    def shift(self, days: int) -> DateRange:
        delta = timedelta(days=days)
        return DateRange(self.start + delta, self.end + delta)

    def shift_to_start(self, new_start: date) -> DateRange:
        """Move the range to begin at ``new_start``, keeping its duration."""
        new_start = _as_date(new_start)
        return DateRange(new_start, new_start + self.duration)

    def next_period(self) -> DateRange:
        """Range of identical duration starting the day after this one ends."""
        start = self.end + _ONE_DAY
        return DateRange(start, start + self.duration)

    def previous_period(self) -> DateRange:
        """Range of identical duration ending the day before this one starts."""
        end = self.start - _ONE_DAY
        return DateRange(end - self.duration, end)

    # -- Enumeration --------------------------------------------------------

    def dates(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += _ONE_DAY

    def weekdays(self) -> Iterator[date]:
        return (d for d in self.dates() if d.weekday() not in _WEEKEND)

    def weekend_days(self) -> Iterator[date]:
        return (d for d in self.dates() if d.weekday() in _WEEKEND)

    @property
    def weekday_count(self) -> int:
        return sum(1 for _ in self.weekdays())

    @property
    def weekend_count(self) -> int:
        return sum(1 for _ in self.weekend_days())

    # -- Formatting ---------------------------------------------------------

    def format(self, fmt: str = "%Y-%m-%d") -> str:
        if self.is_single_day:
            return self.start.strftime(fmt)
        return f"{self.start.strftime(fmt)} to {self.end.strftime(fmt)}"

    def __str__(self) -> str:
        return self.format()
