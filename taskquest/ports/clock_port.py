"""Clock and id ports — time and identity supplied from outside the core."""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol


class ClockPort(Protocol):
    """Source of the current timestamp and calendar day."""

    def now(self) -> datetime: ...

    def today(self) -> date: ...


class IdGeneratorPort(Protocol):
    """Source of unique, never-reused identifiers."""

    def next(self) -> str: ...
