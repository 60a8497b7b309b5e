"""
TaskQuest — Task Store.

Owns the task collection. Every mutation is a full read-modify-write of the
persisted ``user-tasks`` blob; the in-memory mirror on SessionState is only
replaced after the write succeeded (write-through), so it never holds a task
the store does not.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from taskquest.core.errors import NotFoundError, StoreUnavailableError, ValidationError
from taskquest.core.state import SessionState
from taskquest.data.models import Task, TaskInput
from taskquest.ports.store_port import USER_TASKS_KEY

if TYPE_CHECKING:
    from taskquest.ports.clock_port import ClockPort, IdGeneratorPort
    from taskquest.ports.store_port import StorePort

logger = logging.getLogger(__name__)


def _describe(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into one readable line, e.g. "title: ..."."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "input"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def validate_task_input(data: TaskInput | dict[str, Any]) -> TaskInput:
    """Coerce raw input into a TaskInput, raising the engine's ValidationError."""
    if isinstance(data, TaskInput):
        return data
    try:
        return TaskInput.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


class TaskStore:
    """Store-backed owner of the user's tasks."""

    def __init__(
        self,
        store: StorePort,
        clock: ClockPort,
        ids: IdGeneratorPort,
        state: SessionState | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._ids = ids
        self._state = state if state is not None else SessionState()

    # ------------------------------------------------------------------
    # Load / persist
    # ------------------------------------------------------------------

    async def _read(self) -> list[Task]:
        raw = await self._store.get(USER_TASKS_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise StoreUnavailableError(f"Corrupt '{USER_TASKS_KEY}' blob: expected a list")
        try:
            return [Task.model_validate(item) for item in raw]
        except PydanticValidationError as exc:
            raise StoreUnavailableError(f"Corrupt '{USER_TASKS_KEY}' blob: {exc}") from exc

    async def _write(self, tasks: list[Task]) -> None:
        await self._store.set(USER_TASKS_KEY, [t.to_json() for t in tasks])
        self._state.tasks = tasks

    async def load(self) -> list[Task]:
        """Replace the mirror with whatever the store currently holds."""
        tasks = await self._read()
        self._state.tasks = tasks
        logger.debug("Loaded %d tasks", len(tasks))
        return list(tasks)

    async def refresh(self) -> list[Task]:
        """Re-read the store; used by the periodic refresh so that tasks
        deleted or completed elsewhere are never resurrected from a stale
        mirror."""
        return await self.load()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, data: TaskInput | dict[str, Any]) -> Task:
        """Validate input and append a new, not-yet-completed task.

        date defaults to the clock's current day.
        """
        task_input = validate_task_input(data)
        tasks = await self._read()

        task = Task(
            id=self._ids.next(),
            title=task_input.title,
            category=task_input.category,
            priority=task_input.priority,
            time=task_input.time,
            date=task_input.date or self._clock.today(),
            from_suggestion=task_input.from_suggestion,
            created_at=self._clock.now(),
        )
        await self._write([*tasks, task])
        logger.info(
            "Task created: %s '%s' [%s] for %s",
            task.id, task.title, task.category.value, task.date.isoformat(),
        )
        return task

    async def complete(self, task_id: str) -> Task:
        """Mark a task completed.

        Raises NotFoundError when the task is missing OR already completed:
        a second completion would award points twice upstream.
        """
        tasks = await self._read()
        for index, task in enumerate(tasks):
            if task.id == task_id:
                break
        else:
            raise NotFoundError(f"Task {task_id} not found")

        if task.completed:
            raise NotFoundError(f"Task {task_id} is already completed")

        done = task.model_copy(update={"completed": True, "completed_at": self._clock.now()})
        await self._write([*tasks[:index], done, *tasks[index + 1:]])
        logger.info("Task completed: %s '%s'", done.id, done.title)
        return done

    async def delete(self, task_id: str) -> bool:
        """Permanently remove a task. Missing ids are a no-op (returns False)."""
        tasks = await self._read()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            self._state.tasks = tasks
            return False

        await self._write(remaining)
        logger.info("Task deleted: %s", task_id)
        return True

    # ------------------------------------------------------------------
    # Reads (mirror)
    # ------------------------------------------------------------------

    def get(self, task_id: str) -> Task | None:
        for task in self._state.tasks:
            if task.id == task_id:
                return task
        return None

    def all(self) -> list[Task]:
        return list(self._state.tasks)

    def list_for_day(self, day: date | datetime) -> list[Task]:
        """Open (not completed) tasks dated on day, in insertion order."""
        if isinstance(day, datetime):
            day = day.date()
        return [t for t in self._state.tasks if t.date == day and not t.completed]
