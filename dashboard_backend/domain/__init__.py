"""Domain layer definitions."""

from .records import (
    IDENTITY_KEY,
    LAST_UPDATED_FIELD,
    SOURCE_FIELD,
    SOURCE_MANUAL_UPLOAD,
    SOURCE_PIPELINE,
    TIMESTAMP_FIELD,
    MergeResult,
    Record,
    TimeSavedState,
)

__all__ = [
    "IDENTITY_KEY",
    "LAST_UPDATED_FIELD",
    "SOURCE_FIELD",
    "SOURCE_MANUAL_UPLOAD",
    "SOURCE_PIPELINE",
    "TIMESTAMP_FIELD",
    "MergeResult",
    "Record",
    "TimeSavedState",
]
