from __future__ import annotations

import asyncio
import logging
from typing import Any
from uuid import uuid4

from dashboard_backend.core.clock import utc_timestamp
from dashboard_backend.core.validation import BlobNotFoundError, StorageError
from dashboard_backend.infrastructure import BlobStore, load_json_or_default, read_json, write_json

logger = logging.getLogger(__name__)

FEEDBACK_KEY = "feedback.json"


class FeedbackService:
    """Append-only feedback log stored as one JSON array."""

    def __init__(self, store: BlobStore, *, key: str = FEEDBACK_KEY) -> None:
        self._store = store
        self._key = key
        self._lock = asyncio.Lock()

    def list_feedback(self) -> list[dict[str, Any]]:
        data = load_json_or_default(self._store, self._key, [])
        if not isinstance(data, list):
            logger.warning("Stored %s is not a list, serving no feedback", self._key)
            return []
        return data

    def _append(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            entries = read_json(self._store, self._key)
        except BlobNotFoundError:
            entries = []
        if not isinstance(entries, list):
            raise StorageError(f"stored {self._key} is not a list")

        entry = dict(payload)
        entry["id"] = uuid4().hex
        entry["submittedAt"] = utc_timestamp()
        entries.append(entry)
        write_json(self._store, self._key, entries)
        return entry

    async def submit(self, payload: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            entry = await asyncio.to_thread(self._append, payload)
        logger.info("Stored %s feedback for %s", entry.get("type") or "untyped", entry.get("asin") or "unknown ASIN")
        return entry
