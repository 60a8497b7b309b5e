"""
TaskQuest — Progress Coordinator.

UI-agnostic orchestration layer: the presentation shell calls initialize()
once per session and then dispatches user actions here. The coordinator
mutates TaskStore/StatsEngine, awaits every store write, and only then
builds the structured result it returns. It never renders anything.

Owns the SessionState (shared by handle with both engines) and the ephemeral
suggestion list. Day rollover is detected here, explicitly, on initialize()
and on every refresh().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any

from taskquest.core.errors import NotFoundError
from taskquest.core.state import SessionState
from taskquest.core.stats_engine import DEFAULT_POINTS_PER_LEVEL, StatsEngine
from taskquest.core.suggestions import SuggestionEngine
from taskquest.core.task_store import TaskStore

if TYPE_CHECKING:
    from taskquest.data.models import Suggestion, Task, TaskInput, TaskTemplate, UserStats
    from taskquest.ports.clock_port import ClockPort, IdGeneratorPort
    from taskquest.ports.store_port import StorePort
    from taskquest.ports.template_port import TemplateSourcePort

logger = logging.getLogger(__name__)

DEFAULT_POINTS_PER_TASK = 10


# ---------------------------------------------------------------------------
# Response types
# ---------------------------------------------------------------------------


@dataclass
class ReadModel:
    """Snapshot handed to the presentation layer for (re-)rendering."""

    stats: UserStats
    todays_tasks: list[Task] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    templates: dict[str, list[TaskTemplate]] = field(default_factory=dict)
    completed_today: int = 0
    total_today: int = 0   # open and completed tasks dated today


@dataclass
class CompletionResult:
    task: Task
    points_awarded: int
    leveled_up: bool
    stats: UserStats
    new_level: int | None = None   # only set when leveled_up


# ---------------------------------------------------------------------------
# ProgressCoordinator
# ---------------------------------------------------------------------------


class ProgressCoordinator:
    """Single entry point for every dashboard operation."""

    def __init__(
        self,
        store: StorePort,
        clock: ClockPort,
        ids: IdGeneratorPort,
        templates: TemplateSourcePort | None = None,
        state: SessionState | None = None,
        points_per_task: int = DEFAULT_POINTS_PER_TASK,
        points_per_level: int = DEFAULT_POINTS_PER_LEVEL,
        suggestion_engine: SuggestionEngine | None = None,
        template_categories: list[str] | None = None,
    ) -> None:
        self._clock = clock
        self._state = state if state is not None else SessionState()
        self._stats = StatsEngine(store, self._state, points_per_level=points_per_level)
        self._tasks = TaskStore(store, clock, ids, self._state)
        self._suggester = suggestion_engine or SuggestionEngine()
        self._template_source = templates
        self._template_categories = list(template_categories or [])
        self._points_per_task = points_per_task

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def stats_engine(self) -> StatsEngine:
        return self._stats

    @property
    def task_store(self) -> TaskStore:
        return self._tasks

    @property
    def suggestions(self) -> list[Suggestion]:
        return list(self._state.suggestions)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> ReadModel:
        """Load persisted state and build the first read model of a session."""
        today = self._clock.today()

        await self._stats.load()
        await self._tasks.load()
        await self._roll_over_if_needed(today)
        await self._stats.record_login_activity(today)

        self._state.templates = await self._load_templates()
        self._regenerate_suggestions(today)

        logger.info(
            "Dashboard initialized for %s: %d open tasks today, %d suggestions",
            today.isoformat(), len(self._tasks.list_for_day(today)),
            len(self._state.suggestions),
        )
        return self.read_model()

    async def refresh(self) -> ReadModel:
        """Re-read the store and handle a day change since the last check.

        Run periodically between user actions. Always reloads both mirrors
        from the store instead of trusting them.
        """
        today = self._clock.today()

        await self._stats.load()
        await self._tasks.refresh()
        rolled_over = await self._roll_over_if_needed(today)

        if rolled_over or self._state.session_day != today:
            await self._stats.record_login_activity(today)
            self._regenerate_suggestions(today)

        return self.read_model()

    def read_model(self) -> ReadModel:
        today = self._clock.today()
        stats = self._state.stats
        if stats is None:
            raise RuntimeError("ProgressCoordinator.initialize() must be awaited first")
        dated_today = [t for t in self._tasks.all() if t.date == today]
        return ReadModel(
            stats=stats,
            todays_tasks=self._tasks.list_for_day(today),
            suggestions=list(self._state.suggestions),
            templates=dict(self._state.templates),
            completed_today=sum(1 for t in dated_today if t.completed),
            total_today=len(dated_today),
        )

    async def _roll_over_if_needed(self, today: date) -> bool:
        """Reset daily XP exactly once when the stored XP day is not today."""
        stored_day = await self._stats.xp_day()
        if stored_day is None:
            await self._stats.mark_xp_day(today)
            return False
        if stored_day == today:
            return False

        logger.info("Day rollover: %s -> %s", stored_day.isoformat(), today.isoformat())
        await self._stats.reset_daily_xp(today)
        return True

    def _regenerate_suggestions(self, today: date) -> None:
        self._state.suggestions = self._suggester.generate(today, self._tasks.all())
        self._state.session_day = today

    async def _load_templates(self) -> dict[str, list[TaskTemplate]]:
        """Fetch templates per category; failures are logged and skipped."""
        if self._template_source is None:
            return {}

        loaded: dict[str, list[TaskTemplate]] = {}
        for category in self._template_categories:
            try:
                loaded[category] = await self._template_source.fetch(category)
            except Exception as exc:
                logger.warning("Template fetch for '%s' failed: %s", category, exc)
        return loaded

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def create_task(self, data: TaskInput | dict[str, Any]) -> Task:
        return await self._tasks.create(data)

    async def delete_task(self, task_id: str) -> bool:
        return await self._tasks.delete(task_id)

    async def complete_task(self, task_id: str) -> CompletionResult:
        """Complete a task and award the flat per-task points.

        NotFoundError from the task store propagates unchanged; no retry.
        """
        task = await self._tasks.complete(task_id)
        award = await self._stats.award_points(self._points_per_task, completions=1)

        return CompletionResult(
            task=task,
            points_awarded=award.points,
            leveled_up=award.leveled_up,
            stats=self._state.stats,
            new_level=award.new_level if award.leveled_up else None,
        )

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def _find_suggestion(self, suggestion_id: str) -> Suggestion | None:
        for suggestion in self._state.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    async def accept_suggestion(self, suggestion_id: str) -> Task:
        """Turn a suggestion into a task and drop it from this session's list."""
        suggestion = self._find_suggestion(suggestion_id)
        if suggestion is None:
            raise NotFoundError(f"Suggestion {suggestion_id} not found")

        task = await self._tasks.create(suggestion.to_task_input())
        self._state.suggestions = [
            s for s in self._state.suggestions if s.id != suggestion_id
        ]
        logger.info("Suggestion accepted: %s -> task %s", suggestion_id, task.id)
        return task

    def dismiss_suggestion(self, suggestion_id: str) -> None:
        """Drop a suggestion for this session; unknown ids are ignored."""
        before = len(self._state.suggestions)
        self._state.suggestions = [
            s for s in self._state.suggestions if s.id != suggestion_id
        ]
        if len(self._state.suggestions) < before:
            logger.info("Suggestion dismissed: %s", suggestion_id)


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def create_coordinator() -> ProgressCoordinator:
    """Build a coordinator from settings with the configured adapters."""
    from taskquest.adapters.store_factory import create_store
    from taskquest.adapters.system_clock import SystemClock, UuidGenerator
    from taskquest.adapters.template_factory import create_template_source
    from taskquest.config import settings

    return ProgressCoordinator(
        store=create_store(),
        clock=SystemClock(settings.TIMEZONE),
        ids=UuidGenerator(),
        templates=create_template_source(),
        points_per_task=settings.POINTS_PER_TASK,
        points_per_level=settings.POINTS_PER_LEVEL,
        suggestion_engine=SuggestionEngine(
            max_count=settings.MAX_SUGGESTIONS,
            suppress_if_category_present=settings.SUPPRESS_IF_CATEGORY_PRESENT,
        ),
        template_categories=settings.TEMPLATE_CATEGORIES,
    )
