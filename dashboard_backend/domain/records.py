"""Domain entities for workflow record ingestion."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Record = dict[str, Any]

IDENTITY_KEY = "PB C-ASIN"

TIMESTAMP_FIELD = "_timestamp"
LAST_UPDATED_FIELD = "_lastUpdated"
SOURCE_FIELD = "_source"

SOURCE_MANUAL_UPLOAD = "manual_upload"
SOURCE_PIPELINE = "pipeline"


@dataclass(slots=True)
class MergeResult:
    """Outcome of merging an incoming batch into a stored collection."""

    merged: list[Record] = field(default_factory=list)
    new_count: int = 0
    updated_count: int = 0
    incoming_count: int = 0

    @property
    def total_count(self) -> int:
        return len(self.merged)


@dataclass(slots=True)
class TimeSavedState:
    """Running total of minutes saved by the automation."""

    total_minutes: int = 0
    execution_count: int = 0
    last_updated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMinutes": self.total_minutes,
            "executionCount": self.execution_count,
            "lastUpdated": self.last_updated,
        }
