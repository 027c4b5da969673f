from __future__ import annotations

from typing import Any

from dashboard_backend.core.clock import utc_timestamp
from dashboard_backend.domain import TimeSavedState

DEFAULT_MINUTES_PER_ITEM = 15


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def time_saved_from_dict(data: Any) -> TimeSavedState:
    """Build a state from a stored document, tolerating missing fields."""

    if not isinstance(data, dict):
        return TimeSavedState()
    last_updated = data.get("lastUpdated")
    return TimeSavedState(
        total_minutes=_to_int(data.get("totalMinutes")),
        execution_count=_to_int(data.get("executionCount")),
        last_updated=str(last_updated) if last_updated else None,
    )


def apply_time_saved(
    state: TimeSavedState,
    count: int,
    *,
    minutes_per_item: int = DEFAULT_MINUTES_PER_ITEM,
    now: str | None = None,
) -> TimeSavedState:
    """Return a new state with ``count`` processed items added.

    The execution counter advances on every call, including ``count == 0``.
    """

    if count < 0:
        raise ValueError("count must not be negative")
    return TimeSavedState(
        total_minutes=state.total_minutes + count * minutes_per_item,
        execution_count=state.execution_count + 1,
        last_updated=now or utc_timestamp(),
    )
