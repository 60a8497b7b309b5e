"""System clock and UUID id adapters — implement ClockPort / IdGeneratorPort."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from zoneinfo import ZoneInfo


class SystemClock:
    """Wall-clock time in the configured timezone."""

    def __init__(self, timezone: str | None = None) -> None:
        if timezone is None:
            from taskquest.config import settings
            timezone = settings.TIMEZONE

        self._tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def today(self) -> date:
        return self.now().date()


class UuidGenerator:
    """Random UUID4 hex ids; collisions are not a practical concern."""

    def next(self) -> str:
        return uuid.uuid4().hex
