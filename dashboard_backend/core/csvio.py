from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from dashboard_backend.domain import IDENTITY_KEY

UPLOAD_TEMPLATE_FIELDS = [
    IDENTITY_KEY,
    "1P C-ASIN",
    "GL",
    "positioning",
    "FLC Check",
    "PCOGS+IB-VCCC Check",
    "PCOGS+IB-VFCC Check",
    "CTS Model",
    "CTB Model",
    "Tariff Impact >20%",
    "pricing_recommendation",
    "llm_our_product",
    "llm_our_price",
    "llm_competitor_product",
    "llm_competitor_price",
    "justification",
    "strategic_priority",
]


def records_to_csv(rows: Iterable[dict], columns: Sequence[str] | None = None) -> str:
    df = pd.DataFrame(list(rows), columns=list(columns) if columns is not None else None)
    if df.empty and not len(df.columns):
        return ""
    return df.to_csv(index=False)


def upload_template_csv() -> str:
    return records_to_csv([], columns=UPLOAD_TEMPLATE_FIELDS)
