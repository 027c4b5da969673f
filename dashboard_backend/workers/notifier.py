from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from dashboard_backend.domain import TimeSavedState

if TYPE_CHECKING:  # pragma: no cover
    from dashboard_backend.application.time_saved import TimeSavedService

logger = logging.getLogger(__name__)


class TimeSavedNotifier:
    """Runs best-effort time-saved updates in the background.

    Failures are logged and never reach the request that scheduled them.
    """

    def __init__(self, service: "TimeSavedService") -> None:
        self._service = service
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, count: int) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._run(count))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, count: int) -> TimeSavedState | None:
        try:
            return await self._service.record_items(count)
        except Exception:
            logger.exception("Time-saved update for %d items failed", count)
            return None

    async def drain(self) -> None:
        """Wait for every scheduled update to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks))
