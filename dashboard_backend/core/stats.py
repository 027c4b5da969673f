"""Summary counters over workflow records, as shown on the dashboard cards."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import pandas as pd

from dashboard_backend.domain import Record

RECOMMENDATION_FIELDS = ["pricing_recommendation", "price_recommendation", "Price Action", "Status"]
POSITIONING_FIELDS = ["positioning", "Spec Check"]
GL_FIELDS = ["GL", "gl"]

STAT_KEYS = ["totalRecords", "priceMatch", "revertToBase", "comparable", "underSpec", "overSpec"]


def _frame(records: Iterable[Record]) -> pd.DataFrame:
    # object dtype keeps integer cells from being upcast to float by missing values
    return pd.DataFrame(list(records), dtype=object)


def _cell_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and value != value):
        return ""
    return str(value).strip()


def _coalesce(frame: pd.DataFrame, columns: Sequence[str]) -> pd.Series:
    """First non-empty value across ``columns`` for every row, as text."""

    result = pd.Series("", index=frame.index, dtype="object")
    for column in columns:
        if column not in frame.columns:
            continue
        values = frame[column].map(_cell_text)
        result = result.where(result != "", values)
    return result


def _contains_any(values: pd.Series, needles: Sequence[str]) -> int:
    matched = pd.Series(False, index=values.index)
    for needle in needles:
        matched |= values.str.contains(needle, regex=False)
    return int(matched.sum())


def available_gls(records: Iterable[Record]) -> list[str]:
    frame = _frame(records)
    if frame.empty:
        return []
    gls = _coalesce(frame, GL_FIELDS)
    return sorted({value for value in gls if value})


def aggregate_workflow_stats(records: Iterable[Record], gls: Sequence[str] | None = None) -> dict[str, int]:
    frame = _frame(records)
    if frame.empty:
        return {key: 0 for key in STAT_KEYS}

    if gls:
        frame = frame[_coalesce(frame, GL_FIELDS).isin(list(gls))]

    recommendation = _coalesce(frame, RECOMMENDATION_FIELDS).str.lower()
    positioning = _coalesce(frame, POSITIONING_FIELDS).str.lower()

    return {
        "totalRecords": int(len(frame)),
        "priceMatch": _contains_any(recommendation, ["price match"]),
        "revertToBase": _contains_any(recommendation, ["revert to base"]),
        "comparable": _contains_any(positioning, ["comparable"]),
        "underSpec": _contains_any(positioning, ["under-spec", "underspec"]),
        "overSpec": _contains_any(positioning, ["over-spec", "overspec"]),
    }
