"""Store port — abstract interface for the local key-value store.

Core modules depend on this protocol, never on a specific backend.
Values are JSON-serializable (dicts, lists, strings, numbers, None).
"""

from __future__ import annotations

from typing import Any, Protocol

USER_STATS_KEY = "user-stats"
USER_TASKS_KEY = "user-tasks"
LAST_ACTIVE_DATE_KEY = "last-active-date"


class StoreUnavailableError(Exception):
    """Raised when the persistence layer fails to read or write."""


class StorePort(Protocol):
    """Abstract persistent key-value store used by core modules."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...
