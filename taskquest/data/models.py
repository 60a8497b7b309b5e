"""
TaskQuest — Data Models.

Tasks and stats persist as JSON blobs in the local key-value store, so every
persisted model serializes with camelCase keys (``totalPoints``,
``completedAt``) and validates on the way back in. Suggestions are ephemeral
and never written to the store.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    STUDY = "study"
    MEALS = "meals"
    CLEANING = "cleaning"
    BUDGET = "budget"
    DIY = "diy"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        """Dump to the JSON-safe camelCase dict written to the store."""
        return self.model_dump(mode="json", by_alias=True)


class TaskInput(_CamelModel):
    """User- or suggestion-supplied fields for a new task.

    JSON example:
    {
        "title": "Read chapter 3",
        "category": "study",
        "priority": "high",
        "time": 45,
        "date": "2026-10-19"
    }
    """

    title: str
    category: Category
    priority: Priority = Priority.MEDIUM
    time: int | None = Field(default=None, ge=0)
    date: dt.date | None = None
    from_suggestion: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def drop_time_of_day(cls, v):
        if isinstance(v, dt.datetime):
            return v.date()
        return v


class Task(_CamelModel):
    """A single dashboard task.

    Only the completion path flips ``completed``; ``completed_at`` is set
    in the same step and never touched again.
    """

    id: str
    title: str
    category: Category
    priority: Priority = Priority.MEDIUM
    time: int | None = Field(default=None, ge=0)
    date: dt.date
    completed: bool = False
    completed_at: dt.datetime | None = None
    from_suggestion: bool = False
    created_at: dt.datetime | None = None


class UserStats(_CamelModel):
    """Lifetime progress for the (single) dashboard profile."""

    total_points: int = Field(default=0, ge=0)
    level: int = 1   # derived from total_points; never trusted from the store
    xp_today: int = Field(default=0, ge=0)
    tasks_completed: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_active_date: dt.date | None = None


class Suggestion(_CamelModel):
    """A recommended task produced by the calendar rules. Never persisted."""

    id: str
    title: str
    category: Category
    time: int | None = None
    priority: Priority = Priority.MEDIUM
    reason: str
    icon: str = ""

    def to_task_input(self) -> TaskInput:
        return TaskInput(
            title=self.title,
            category=self.category,
            priority=self.priority,
            time=self.time,
            from_suggestion=True,
        )


class TaskTemplate(_CamelModel):
    """A catalogue entry loaded from a static template file.

    Unknown keys in the source JSON (ingredients, steps, ...) are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )

    id: str
    name: str
    category: str = ""
    time: int | None = None
    points: int = 0
    difficulty: str = ""
    description: str = ""


def templates_from_json(payload: object, category: str) -> list[TaskTemplate]:
    """Parse a template file body: either one template object or a list.

    Entries without an explicit category inherit the requested one.
    Raises pydantic.ValidationError or TypeError on malformed payloads.
    """
    if isinstance(payload, dict):
        items = [payload]
    elif isinstance(payload, list):
        items = payload
    else:
        raise TypeError(f"Expected a JSON object or list, got {type(payload).__name__}")

    templates: list[TaskTemplate] = []
    for item in items:
        if not isinstance(item, dict):
            raise TypeError(f"Expected template objects, got {type(item).__name__}")
        templates.append(TaskTemplate.model_validate({"category": category, **item}))
    return templates
