from __future__ import annotations

import asyncio
import logging

from dashboard_backend.core.time_saved import DEFAULT_MINUTES_PER_ITEM, apply_time_saved, time_saved_from_dict
from dashboard_backend.core.validation import BlobNotFoundError
from dashboard_backend.domain import TimeSavedState
from dashboard_backend.infrastructure import BlobStore, load_json_or_default, read_json, write_json

logger = logging.getLogger(__name__)

TIME_SAVED_KEY = "rbm-time-saved.json"


class TimeSavedService:
    """Maintains the running time-saved estimate."""

    def __init__(
        self,
        store: BlobStore,
        *,
        minutes_per_item: int = DEFAULT_MINUTES_PER_ITEM,
        key: str = TIME_SAVED_KEY,
    ) -> None:
        self._store = store
        self._key = key
        self._lock = asyncio.Lock()
        self.minutes_per_item = minutes_per_item

    def get_state(self) -> TimeSavedState:
        return time_saved_from_dict(load_json_or_default(self._store, self._key, None))

    def _update(self, count: int) -> TimeSavedState:
        try:
            current = time_saved_from_dict(read_json(self._store, self._key))
        except BlobNotFoundError:
            current = TimeSavedState()
        updated = apply_time_saved(current, count, minutes_per_item=self.minutes_per_item)
        write_json(self._store, self._key, updated.to_dict())
        return updated

    async def record_items(self, count: int) -> TimeSavedState:
        if count < 0:
            raise ValueError("count must not be negative")
        async with self._lock:
            state = await asyncio.to_thread(self._update, count)
        logger.info(
            "Recorded %d items (%d minutes), total %d minutes over %d executions",
            count,
            count * self.minutes_per_item,
            state.total_minutes,
            state.execution_count,
        )
        return state
