"""
TaskQuest — Suggestion Engine.

Rule-based task recommendations from the calendar date. Pure business logic:
no I/O, no randomness. The same date and task list always produce the same
suggestions, ids included.

Every rule is evaluated independently and all matching rules fire, in rule
order, before the list is truncated to max_count. By default existing tasks
are ignored: a study suggestion is emitted even when a study task already
exists. suppress_if_category_present switches that off per category.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from taskquest.core.errors import ValidationError
from taskquest.data.models import Category, Priority, Suggestion, Task

logger = logging.getLogger(__name__)

DEFAULT_MAX_SUGGESTIONS = 3

_MONDAY, _FRIDAY, _SATURDAY, _SUNDAY = 0, 4, 5, 6


@dataclass(frozen=True)
class SuggestionRule:
    """One calendar heuristic and the suggestion it emits."""

    key: str
    title: str
    category: Category
    priority: Priority
    time: int
    icon: str
    reason: str
    applies: Callable[[date], bool]

    def build(self, today: date) -> Suggestion:
        return Suggestion(
            id=f"suggestion-{self.key}-{today.isoformat()}",
            title=self.title,
            category=self.category,
            time=self.time,
            priority=self.priority,
            reason=self.reason,
            icon=self.icon,
        )


RULES: tuple[SuggestionRule, ...] = (
    SuggestionRule(
        key="study",
        title="Study session",
        category=Category.STUDY,
        priority=Priority.HIGH,
        time=45,
        icon="📚",
        reason="It's a weekday, a good time to keep your study routine going.",
        applies=lambda d: _MONDAY <= d.weekday() <= _FRIDAY,
    ),
    SuggestionRule(
        key="meal-prep",
        title="Meal prep for the week",
        category=Category.MEALS,
        priority=Priority.MEDIUM,
        time=60,
        icon="🍳",
        reason="Sunday prep saves time on busy weekdays.",
        applies=lambda d: d.weekday() == _SUNDAY,
    ),
    SuggestionRule(
        key="cleaning",
        title="Weekend cleaning",
        category=Category.CLEANING,
        priority=Priority.MEDIUM,
        time=30,
        icon="🧹",
        reason="Weekends are ideal for a quick tidy-up.",
        applies=lambda d: d.weekday() in (_SATURDAY, _SUNDAY),
    ),
    SuggestionRule(
        key="budget-review",
        title="Budget review",
        category=Category.BUDGET,
        priority=Priority.HIGH,
        time=20,
        icon="💰",
        reason="Start of the month: review last month's spending and plan this one.",
        applies=lambda d: d.day <= 5,
    ),
)


def _covered_categories(today: date, tasks: Iterable[Task]) -> set[Category]:
    """Categories with an open task already planned for today."""
    return {t.category for t in tasks if t.date == today and not t.completed}


class SuggestionEngine:
    """Evaluates RULES against a date; holds only configuration."""

    def __init__(
        self,
        max_count: int = DEFAULT_MAX_SUGGESTIONS,
        suppress_if_category_present: bool = False,
        rules: tuple[SuggestionRule, ...] = RULES,
    ) -> None:
        if max_count < 0:
            raise ValidationError(f"max_count must not be negative, got {max_count}")
        self._max_count = max_count
        self._suppress = suppress_if_category_present
        self._rules = rules

    def generate(
        self,
        today: date,
        existing_tasks: Iterable[Task] = (),
        max_count: int | None = None,
    ) -> list[Suggestion]:
        """Return the matching suggestions for today, at most max_count."""
        limit = self._max_count if max_count is None else max_count
        if limit < 0:
            raise ValidationError(f"max_count must not be negative, got {limit}")

        covered = _covered_categories(today, existing_tasks) if self._suppress else set()

        suggestions: list[Suggestion] = []
        for rule in self._rules:
            if not rule.applies(today):
                continue
            if rule.category in covered:
                logger.debug("Suggestion '%s' suppressed: category already planned", rule.key)
                continue
            suggestions.append(rule.build(today))

        return suggestions[:limit]
