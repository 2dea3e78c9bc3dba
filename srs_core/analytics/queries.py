"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from srs_core.analytics.constants import ITEM_COLUMNS
from srs_core.scheduling.memory_state import LearnableItem


def load_items_df(items: Iterable[LearnableItem]) -> pd.DataFrame:
    """
    Load item scheduling state into a dataframe, one row per item.
    """
    rows = [
        {
            "item_id": item.id,
            "scope": item.scope,
            "strength": item.strength,
            "interval_days": item.interval_days,
            "ease_factor": item.ease_factor,
            "next_due": item.next_due,
            "last_review": item.last_review,
            "fsrs_stability": item.fsrs_stability,
            "fsrs_lapses": item.fsrs_lapses,
        }
        for item in items
    ]
    if not rows:
        return pd.DataFrame(columns=ITEM_COLUMNS)

    df = pd.DataFrame(rows, columns=ITEM_COLUMNS)
    df["next_due"] = pd.to_datetime(df["next_due"], utc=True, errors="coerce")
    df["last_review"] = pd.to_datetime(df["last_review"], utc=True, errors="coerce")
    df["fsrs_stability"] = pd.to_numeric(df["fsrs_stability"], errors="coerce")
    df["fsrs_lapses"] = pd.to_numeric(df["fsrs_lapses"], errors="coerce")
    return df
