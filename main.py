"""
TaskQuest — Entry Point.

`python main.py` loads the dashboard state, logs today's read model and
keeps refreshing it in the background until interrupted.
"""

import asyncio
import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from taskquest.config import settings
from taskquest.core.coordinator import create_coordinator
from taskquest.core.scheduler import run_periodic_refresh

logger = logging.getLogger("taskquest")


async def _run() -> None:
    coordinator = create_coordinator()
    model = await coordinator.initialize()

    stats = model.stats
    logger.info(
        "Level %d (%d points, %d XP today), streak %d days, %d tasks completed",
        stats.level, stats.total_points, stats.xp_today,
        stats.streak_days, stats.tasks_completed,
    )
    for task in model.todays_tasks:
        logger.info("Today: [%s] %s", task.category.value, task.title)
    for suggestion in model.suggestions:
        logger.info("Suggested: %s %s (%s)", suggestion.icon, suggestion.title, suggestion.reason)

    await run_periodic_refresh(
        coordinator, interval_seconds=settings.REFRESH_INTERVAL_MINUTES * 60,
    )


def main() -> None:
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
