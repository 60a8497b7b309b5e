"""Explicit session state shared by the engines of one dashboard instance.

The coordinator creates (or is given) one SessionState and hands the same
object to StatsEngine and TaskStore, so several independent dashboards can
coexist in one process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from taskquest.data.models import Suggestion, Task, TaskTemplate, UserStats


@dataclass
class SessionState:
    """In-memory mirrors of the store plus the ephemeral session data."""

    stats: UserStats | None = None
    tasks: list[Task] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    templates: dict[str, list[TaskTemplate]] = field(default_factory=dict)
    session_day: date | None = None   # calendar day suggestions were built for
