# app/core/clock.py
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo


class Clock(ABC):
    """
    Source of "now" for the status engine.

    Lifecycle operations read the clock once and pass the resulting instant
    down to every date comparison they make, so a fan-out over many users
    observes a single consistent day.
    """

    tz: tzinfo = timezone.utc

    @abstractmethod
    def now(self) -> datetime: ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time in the configured timezone."""

    def __init__(self, tz_name: str = "UTC") -> None:
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)


class FixedClock(Clock):
    """Clock pinned to a given instant. Used in tests and replays."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.tz = instant.tzinfo
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **delta) -> None:
        self.instant = self.instant + timedelta(**delta)
