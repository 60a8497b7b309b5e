"""
TaskQuest — Periodic Refresh.

Background loop that re-reads today's tasks every few minutes. Runs on the
same event loop as user actions, so a refresh always happens between two
operations, never in the middle of one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from taskquest.ports.store_port import StoreUnavailableError

if TYPE_CHECKING:
    from taskquest.core.coordinator import ProgressCoordinator, ReadModel

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_SECONDS = 5 * 60


async def run_periodic_refresh(
    coordinator: ProgressCoordinator,
    interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
    on_refresh: Callable[[ReadModel], Awaitable[None]] | None = None,
    max_runs: int | None = None,
) -> None:
    """Call coordinator.refresh() every interval_seconds until cancelled.

    A failed refresh is logged and retried on the next tick; only
    cancellation stops the loop. max_runs bounds the loop, mainly for tests.
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be greater than zero")

    runs = 0
    while max_runs is None or runs < max_runs:
        await asyncio.sleep(interval_seconds)
        runs += 1
        try:
            model = await coordinator.refresh()
        except StoreUnavailableError as exc:
            logger.error("Periodic refresh failed: %s", exc)
            continue
        except Exception:
            logger.exception("Periodic refresh crashed")
            continue

        logger.debug(
            "Refreshed: %d open tasks today, %d points",
            len(model.todays_tasks), model.stats.total_points,
        )
        if on_refresh is not None:
            await on_refresh(model)
