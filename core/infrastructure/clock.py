"""
Clock implementations.
"""
from datetime import datetime, timedelta

from django.utils import timezone

from core.ports.clock import Clock


class SystemClock(Clock):
    """Clock backed by Django's timezone-aware ``now``."""

    def now(self) -> datetime:
        return timezone.now()


class FixedClock(Clock):
    """Clock frozen at a given instant."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta: timedelta) -> None:
        self.instant += delta


system_clock = SystemClock()
