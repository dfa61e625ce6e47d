"""Tests for clock implementations."""

from datetime import datetime, timedelta, timezone

import pytest

from integration_contracts.core.clock import SimClock, WallClock


class TestWallClock:
    def test_returns_utc(self):
        now = WallClock().now()
        assert now.tzinfo == timezone.utc


class TestSimClock:
    def test_default_start(self):
        assert SimClock().now() == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_start_normalized_to_utc(self):
        start = datetime(2024, 1, 1, 3, tzinfo=timezone(timedelta(hours=3)))
        clock = SimClock(start)
        assert clock.now().tzinfo == timezone.utc
        assert clock.now().hour == 0

    def test_naive_start_rejected(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            SimClock(datetime(2024, 1, 1))

    def test_advance_ms(self):
        clock = SimClock()
        clock.advance_ms(1500)
        assert clock.now() == datetime(2024, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)

    def test_set_same_time_allowed(self):
        clock = SimClock()
        clock.set_time(clock.now())

    def test_cannot_go_backwards(self):
        clock = SimClock()
        with pytest.raises(ValueError, match="backwards"):
            clock.set_time(datetime(2023, 12, 31, tzinfo=timezone.utc))
