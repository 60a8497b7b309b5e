"""Shared test fixtures and configuration.

Sets env vars BEFORE any taskquest imports so config never reads a real .env
backend, and provides deterministic clock/id collaborators.
"""

import os

# Patch env vars BEFORE any taskquest imports
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("TEMPLATE_BASE_URL", "")
os.environ.setdefault("TEMPLATE_DIR", "")
os.environ.setdefault("TIMEZONE", "UTC")

from datetime import date, datetime, timedelta, timezone

import pytest

# 2026-10-19 is a Monday
MONDAY = date(2026, 10, 19)


class FixedClock:
    """ClockPort whose time only moves when a test says so."""

    def __init__(self, current: datetime | None = None) -> None:
        self.current = current or datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def set_day(self, day: date, hour: int = 9) -> None:
        self.current = datetime(day.year, day.month, day.day, hour, 0, tzinfo=timezone.utc)

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.current += timedelta(days=days, hours=hours)


class SequentialIds:
    """IdGeneratorPort yielding task-1, task-2, ..."""

    def __init__(self) -> None:
        self._n = 0

    def next(self) -> str:
        self._n += 1
        return f"task-{self._n}"


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def memory_store():
    from taskquest.data.kv_store import MemoryStore
    return MemoryStore()


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_taskquest.db")


@pytest.fixture
def sqlite_store(tmp_db_path):
    from taskquest.data.kv_store import SQLiteStore
    return SQLiteStore(db_path=tmp_db_path)


@pytest.fixture
def state():
    from taskquest.core.state import SessionState
    return SessionState()


@pytest.fixture
def stats_engine(memory_store, state):
    from taskquest.core.stats_engine import StatsEngine
    return StatsEngine(memory_store, state)


@pytest.fixture
def task_store(memory_store, clock, ids, state):
    from taskquest.core.task_store import TaskStore
    return TaskStore(memory_store, clock, ids, state)


@pytest.fixture
def coordinator(memory_store, clock, ids):
    from taskquest.core.coordinator import ProgressCoordinator
    return ProgressCoordinator(memory_store, clock, ids)
