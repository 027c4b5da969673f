"""Application service for the stored workflow record collection."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from dashboard_backend.core.csvio import records_to_csv
from dashboard_backend.core.records import coerce_records, merge_records, unwrap_payload
from dashboard_backend.core.stats import aggregate_workflow_stats, available_gls
from dashboard_backend.core.uploads import parse_upload
from dashboard_backend.core.validation import BlobNotFoundError, StorageError
from dashboard_backend.domain import SOURCE_MANUAL_UPLOAD, SOURCE_PIPELINE, MergeResult, Record
from dashboard_backend.infrastructure import BlobStore, load_json_or_default, read_json, write_json

logger = logging.getLogger(__name__)

WORKFLOW_DATA_KEY = "workflow-data.json"


class WorkflowDataService:
    """Read-merge-write access to the workflow collection blob.

    ``_lock`` serialises writers inside this process only. Two processes that
    share a bucket can still overwrite each other's collection.
    """

    def __init__(self, store: BlobStore, *, key: str = WORKFLOW_DATA_KEY) -> None:
        self._store = store
        self._key = key
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def list_records(self) -> list[Record]:
        data = load_json_or_default(self._store, self._key, [])
        if not isinstance(data, list):
            logger.warning("Stored %s is not a list, serving an empty collection", self._key)
            return []
        return data

    def get_stats(self, gls: Sequence[str] | None = None) -> dict[str, Any]:
        records = self.list_records()
        selected = [gl for gl in (gls or []) if gl]
        stats: dict[str, Any] = dict(aggregate_workflow_stats(records, selected))
        stats["availableGLs"] = available_gls(records)
        stats["selectedGLs"] = selected
        return stats

    def export_csv(self) -> str:
        return records_to_csv(self.list_records())

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def _load_for_write(self) -> list[Record]:
        try:
            data = read_json(self._store, self._key)
        except BlobNotFoundError:
            return []
        if not isinstance(data, list):
            raise StorageError(f"stored {self._key} is not a list of records")
        return data

    def _merge_and_save(self, records: list[Record], source: str) -> MergeResult:
        existing = self._load_for_write()
        result = merge_records(existing, records, source=source)
        write_json(self._store, self._key, result.merged)
        logger.info(
            "Merged %d %s records: %d new, %d updated, %d total",
            result.incoming_count,
            source,
            result.new_count,
            result.updated_count,
            result.total_count,
        )
        return result

    async def ingest(self, records: list[Record], *, source: str) -> MergeResult:
        async with self._lock:
            return await asyncio.to_thread(self._merge_and_save, records, source)

    async def ingest_payload(self, payload: Any) -> MergeResult:
        """Merge a JSON body posted by the automation pipeline."""

        records = coerce_records(unwrap_payload(payload))
        return await self.ingest(records, source=SOURCE_PIPELINE)

    async def ingest_upload(self, filename: str | None, content: bytes) -> MergeResult:
        """Parse an uploaded file and merge it; parse errors abort before any write."""

        records = await asyncio.to_thread(parse_upload, filename, content)
        return await self.ingest(records, source=SOURCE_MANUAL_UPLOAD)

    async def clear(self) -> None:
        async with self._lock:
            await asyncio.to_thread(write_json, self._store, self._key, [])
        logger.info("Cleared %s", self._key)
