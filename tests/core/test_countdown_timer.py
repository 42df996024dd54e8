"""Tests for the Qt-driven countdown."""

import pytest

from conftest import FakeClock
from quiz_taker.core.services.countdown_timer import CountdownTimer


def _advance(timer, clock, seconds=1):
    for _ in range(seconds):
        clock.advance(1.0)
        timer._on_tick()


class TestCountdownTimer:
    def test_decrements_one_second_per_tick(self):
        clock = FakeClock()
        timer = CountdownTimer(10, interval_ms=3_600_000, clock=clock)
        seen = []
        timer.remaining_changed.connect(seen.append)

        timer.start()
        _advance(timer, clock, 3)

        assert seen == [9, 8, 7]
        assert timer.remaining_seconds == 7
        timer.stop()

    def test_expires_exactly_once(self):
        clock = FakeClock()
        timer = CountdownTimer(2, interval_ms=3_600_000, clock=clock)
        expirations = []
        timer.expired.connect(lambda: expirations.append(True))

        timer.start()
        _advance(timer, clock, 2)
        # A duplicate tick from the scheduler must not expire again.
        _advance(timer, clock, 2)
        timer._finish()

        assert expirations == [True]
        assert timer.has_expired()
        assert not timer.is_running()
        assert timer.remaining_seconds == 0

    def test_suspended_time_counts_against_the_limit(self):
        clock = FakeClock()
        timer = CountdownTimer(60, interval_ms=3_600_000, clock=clock)
        timer.start()
        _advance(timer, clock, 1)

        clock.advance(30)
        timer._on_tick()

        assert timer.remaining_seconds == 29
        timer.stop()

    def test_suspension_past_deadline_expires_on_next_tick(self):
        clock = FakeClock()
        timer = CountdownTimer(60, interval_ms=3_600_000, clock=clock)
        expirations = []
        timer.expired.connect(lambda: expirations.append(True))
        timer.start()

        clock.advance(600)
        timer._on_tick()

        assert timer.remaining_seconds == 0
        assert expirations == [True]

    def test_stopped_timer_ignores_late_ticks(self):
        clock = FakeClock()
        timer = CountdownTimer(10, interval_ms=3_600_000, clock=clock)
        seen = []
        timer.remaining_changed.connect(seen.append)
        timer.start()
        timer.stop()
        timer.stop()

        _advance(timer, clock, 3)

        assert seen == []
        assert timer.remaining_seconds == 10

    def test_zero_length_countdown_expires_on_start(self):
        timer = CountdownTimer(0, clock=FakeClock())
        expirations = []
        timer.expired.connect(lambda: expirations.append(True))
        timer.start()
        assert expirations == [True]

    def test_negative_length_is_rejected(self):
        with pytest.raises(ValueError):
            CountdownTimer(-1)

    def test_runs_on_the_event_loop(self, qtbot):
        timer = CountdownTimer(3, interval_ms=10)
        with qtbot.waitSignal(timer.expired, timeout=5000):
            timer.start()
        assert timer.remaining_seconds == 0
        assert not timer._timer.isActive()
