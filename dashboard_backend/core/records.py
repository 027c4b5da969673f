"""Merge-and-dedupe logic for workflow records keyed by product identifier."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from dashboard_backend.core.clock import utc_timestamp
from dashboard_backend.domain import (
    IDENTITY_KEY,
    LAST_UPDATED_FIELD,
    SOURCE_FIELD,
    TIMESTAMP_FIELD,
    MergeResult,
    Record,
)

logger = logging.getLogger(__name__)


def identity_of(record: Any, identity_key: str = IDENTITY_KEY) -> str | None:
    """Return the normalised identity key of ``record`` or ``None`` when absent."""

    if not isinstance(record, dict):
        return None
    value = record.get(identity_key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)):
        if value != value:  # NaN
            return None
        return str(value)
    return None


def unwrap_payload(payload: Any) -> Any:
    """Unwrap ``{"data": ...}`` envelopes sent by the automation pipeline."""

    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def coerce_records(payload: Any) -> list[Record]:
    """Coerce a decoded JSON payload into a list of record mappings."""

    items = payload if isinstance(payload, list) else [payload]
    records = [item for item in items if isinstance(item, dict)]
    if len(records) != len(items):
        logger.warning("Ignored %d non-object entries in record payload", len(items) - len(records))
    return records


def keyed_records(records: Iterable[Record], identity_key: str = IDENTITY_KEY) -> list[Record]:
    """Drop records that cannot be deduplicated because their identity key is missing."""

    return [record for record in records if identity_of(record, identity_key) is not None]


def merge_records(
    existing: Iterable[Record],
    incoming: Iterable[Record],
    *,
    source: str | None = None,
    now: str | None = None,
    identity_key: str = IDENTITY_KEY,
) -> MergeResult:
    """Merge ``incoming`` into ``existing`` keyed by ``identity_key``.

    Existing records keep their position when replaced and new identifiers are
    appended in batch order. Later duplicates within ``incoming`` win. Every
    incoming record is copied and stamped with the same ``now`` timestamp so a
    batch shares one ingestion time.
    """

    timestamp = now or utc_timestamp()

    merged: dict[str, Record] = {}
    dropped = 0
    for record in existing:
        key = identity_of(record, identity_key)
        if key is None:
            dropped += 1
            continue
        merged[key] = record
    if dropped:
        logger.warning("Dropped %d stored records without %r", dropped, identity_key)

    batch = keyed_records(incoming, identity_key)
    new_count = 0
    for record in batch:
        key = identity_of(record, identity_key)
        if key not in merged:
            new_count += 1
        stamped = dict(record)
        stamped[TIMESTAMP_FIELD] = timestamp
        stamped[LAST_UPDATED_FIELD] = timestamp
        if source:
            stamped[SOURCE_FIELD] = source
        merged[key] = stamped  # type: ignore[index]

    return MergeResult(
        merged=list(merged.values()),
        new_count=new_count,
        updated_count=len(batch) - new_count,
        incoming_count=len(batch),
    )
