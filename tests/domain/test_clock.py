"""Tests for the injected clock implementations."""

from datetime import UTC, date, datetime, timedelta, timezone

from portfolio_kernel.domain.clock import DeterministicClock, SystemClock


class TestDeterministicClock:

    def test_default_time(self):
        clock = DeterministicClock()
        assert clock.now() == datetime(2025, 1, 10, 12, 0, tzinfo=UTC)
        assert clock.today() == date(2025, 1, 10)

    def test_repeated_calls_stable(self):
        clock = DeterministicClock()
        assert clock.now() == clock.now()

    def test_advance(self):
        clock = DeterministicClock()
        start = clock.now()
        clock.advance(30)
        assert clock.now() - start == timedelta(seconds=30)

    def test_advance_days_moves_today(self):
        clock = DeterministicClock()
        clock.advance_days(22)
        assert clock.today() == date(2025, 2, 1)

    def test_tick(self):
        clock = DeterministicClock()
        start = clock.now()
        assert clock.tick() == start + timedelta(seconds=1)

    def test_set_time_resets_advance(self):
        clock = DeterministicClock()
        clock.advance(100)
        target = datetime(2026, 6, 1, tzinfo=UTC)
        clock.set_time(target)
        assert clock.now() == target

    def test_today_uses_utc(self):
        """A late-evening local time maps to the next UTC calendar day."""
        local = timezone(timedelta(hours=-5))
        clock = DeterministicClock(datetime(2025, 1, 10, 22, 0, tzinfo=local))
        assert clock.today() == date(2025, 1, 11)


class TestSystemClock:

    def test_now_utc_is_aware(self):
        assert SystemClock().now_utc().tzinfo is not None
