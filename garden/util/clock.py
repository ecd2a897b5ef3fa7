"""Clock sources.

Engine math never reads the wall clock. The store asks its ``Clock`` for
``now`` once per action and threads that value through every operation.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Anything that can report the current UTC time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """A clock that only moves when told to (tests, replays)."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self._now = start or datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: Optional[timedelta] = None, **kwargs) -> datetime:
        """Move the clock forward by ``delta`` or by ``timedelta(**kwargs)``."""
        step = delta if delta is not None else timedelta(**kwargs)
        self._now = self._now + step
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment
