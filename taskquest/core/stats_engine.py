"""
TaskQuest — Stats Engine.

Owns UserStats: points, level, XP earned today, lifetime completions and the
login streak. Level is derived from total points after every load and every
mutation, so a stale stored value can never drift from the points.

Day rollover is NOT detected here: the coordinator decides when a new day
has started and calls reset_daily_xp() itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from taskquest.core.errors import StoreUnavailableError, ValidationError
from taskquest.core.state import SessionState
from taskquest.data.models import UserStats
from taskquest.ports.store_port import LAST_ACTIVE_DATE_KEY, USER_STATS_KEY

if TYPE_CHECKING:
    from taskquest.ports.store_port import StorePort

logger = logging.getLogger(__name__)

DEFAULT_POINTS_PER_LEVEL = 500


def level_for_points(total_points: int, points_per_level: int = DEFAULT_POINTS_PER_LEVEL) -> int:
    """Level 1 starts at 0 points; each further level costs points_per_level."""
    return total_points // points_per_level + 1


def _as_day(value: date | datetime) -> date:
    """Drop the time-of-day: streaks and XP days compare calendar dates only."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _require_non_negative_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must not be negative, got {value}")
    return value


@dataclass
class AwardResult:
    """Outcome of award_points(); the caller decides how to present a level-up."""

    points: int
    previous_level: int
    new_level: int

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.previous_level


class StatsEngine:
    """Store-backed owner of the dashboard's UserStats."""

    def __init__(
        self,
        store: StorePort,
        state: SessionState | None = None,
        points_per_level: int = DEFAULT_POINTS_PER_LEVEL,
    ) -> None:
        if points_per_level <= 0:
            raise ValueError("points_per_level must be greater than zero")
        self._store = store
        self._state = state if state is not None else SessionState()
        self._points_per_level = points_per_level

    @property
    def points_per_level(self) -> int:
        return self._points_per_level

    @property
    def stats(self) -> UserStats | None:
        """The in-memory mirror, or None before load()."""
        return self._state.stats

    # ------------------------------------------------------------------
    # Load / persist
    # ------------------------------------------------------------------

    async def load(self) -> UserStats:
        """Read persisted stats, creating and saving defaults on first run."""
        raw = await self._store.get(USER_STATS_KEY)
        if raw is None:
            stats = UserStats()
            await self._write(stats)
            logger.info("No stats found, initialized a fresh profile")
            return stats

        try:
            stats = UserStats.model_validate(raw)
        except PydanticValidationError as exc:
            raise StoreUnavailableError(f"Corrupt '{USER_STATS_KEY}' blob: {exc}") from exc

        stats = self._with_level(stats)
        self._state.stats = stats
        logger.debug(
            "Stats loaded: %d points, level %d, streak %d",
            stats.total_points, stats.level, stats.streak_days,
        )
        return stats

    async def _current(self) -> UserStats:
        """Mutations start from the stored blob, never from a stale mirror."""
        return await self.load()

    def _with_level(self, stats: UserStats) -> UserStats:
        return stats.model_copy(
            update={"level": level_for_points(stats.total_points, self._points_per_level)},
        )

    async def _write(self, stats: UserStats) -> None:
        """Persist first, then swap the mirror, so a failed write changes nothing."""
        stats = self._with_level(stats)
        await self._store.set(USER_STATS_KEY, stats.to_json())
        self._state.stats = stats

    # ------------------------------------------------------------------
    # Streak
    # ------------------------------------------------------------------

    async def record_login_activity(self, today: date | datetime) -> UserStats:
        """Update the consecutive-day streak for an activity check on today.

        Same day twice is a no-op for the streak; the next calendar day
        extends it; anything else (a gap, or a clock that went backwards)
        restarts it at 1.
        """
        today = _as_day(today)
        current = await self._current()
        last = current.last_active_date

        if last is None:
            streak = 1
        elif today == last:
            streak = current.streak_days
        elif today - last == timedelta(days=1):
            streak = current.streak_days + 1
        else:
            streak = 1

        await self._write(
            current.model_copy(update={"streak_days": streak, "last_active_date": today}),
        )
        if streak != current.streak_days:
            logger.info("Streak %d -> %d (last active %s)", current.streak_days, streak, last)
        return self._state.stats

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------

    async def award_points(self, points: int, *, completions: int = 0) -> AwardResult:
        """Add points to the lifetime total and today's XP.

        completions bumps tasks_completed in the same write, so a completed
        task never ends up counted without its points (or the reverse).
        """
        points = _require_non_negative_int("points", points)
        completions = _require_non_negative_int("completions", completions)

        current = await self._current()
        previous_level = current.level
        await self._write(
            current.model_copy(update={
                "total_points": current.total_points + points,
                "xp_today": current.xp_today + points,
                "tasks_completed": current.tasks_completed + completions,
            }),
        )

        result = AwardResult(
            points=points,
            previous_level=previous_level,
            new_level=self._state.stats.level,
        )
        if result.leveled_up:
            logger.info("Level up: %d -> %d", result.previous_level, result.new_level)
        return result

    # ------------------------------------------------------------------
    # Daily XP
    # ------------------------------------------------------------------

    async def reset_daily_xp(self, today: date | datetime) -> UserStats:
        """Zero xp_today and record today as the day XP now belongs to."""
        today = _as_day(today)
        current = await self._current()
        await self._write(current.model_copy(update={"xp_today": 0}))
        await self.mark_xp_day(today)
        logger.info("Daily XP reset for %s (was %d)", today.isoformat(), current.xp_today)
        return self._state.stats

    async def xp_day(self) -> date | None:
        """Return the stored day that xp_today belongs to, or None."""
        raw = await self._store.get(LAST_ACTIVE_DATE_KEY)
        if raw is None:
            return None
        try:
            return date.fromisoformat(raw)
        except (TypeError, ValueError) as exc:
            raise StoreUnavailableError(f"Corrupt '{LAST_ACTIVE_DATE_KEY}' value: {raw!r}") from exc

    async def mark_xp_day(self, today: date | datetime) -> None:
        await self._store.set(LAST_ACTIVE_DATE_KEY, _as_day(today).isoformat())
