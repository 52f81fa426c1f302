"""Clock collaborator — the only place services read the current time."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from hrportal.common.constants import TIMEZONE


class Clock(ABC):
    """Supplies the current instant and the local calendar date."""

    def __init__(self, tz_name: str = TIMEZONE) -> None:
        self.tz = ZoneInfo(tz_name)

    @abstractmethod
    def now(self) -> datetime:
        """Current instant, timezone-aware."""
        raise NotImplementedError

    def today(self) -> date:
        """Calendar date of ``now()`` in the configured local timezone."""
        return self.now().astimezone(self.tz).date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Frozen clock for tests; ``advance`` moves it forward."""

    def __init__(self, instant: datetime, tz_name: str = TIMEZONE) -> None:
        super().__init__(tz_name)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta) -> None:
        self._instant = self._instant + delta
