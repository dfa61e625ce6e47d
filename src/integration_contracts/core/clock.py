"""Clock abstraction for stamping ``OccurredAt``.

WallClock: real wall-clock time (production producers)
SimClock: deterministic simulated time (tests, replays)

Producers never call datetime.now() directly; ``EventFactory`` asks its
clock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol

from .ids import ensure_utc


class IClock(Protocol):
    """Clock interface used by the event factory."""

    def now(self) -> datetime:
        """Current time as timezone-aware UTC datetime."""
        ...


class WallClock:
    """Real wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class SimClock:
    """Simulated clock for deterministic tests.

    Time advances only when explicitly set.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._time = ensure_utc(start) if start else datetime(
            2024, 1, 1, tzinfo=timezone.utc
        )

    def now(self) -> datetime:
        return self._time

    def set_time(self, t: datetime) -> None:
        """Advance time. Must be monotonically non-decreasing."""
        t = ensure_utc(t)
        if t < self._time:
            raise ValueError(
                f"SimClock cannot go backwards: {t} < {self._time}"
            )
        self._time = t

    def advance_ms(self, ms: int) -> None:
        """Advance time by milliseconds."""
        self.set_time(self._time + timedelta(milliseconds=ms))
