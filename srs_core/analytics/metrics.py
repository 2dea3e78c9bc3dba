"""
Metric computations for review analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pandas as pd

from srs_core.analytics.constants import OVERDUE_THRESHOLD_DAYS


def _as_timestamp(now: datetime) -> pd.Timestamp:
    ts = pd.Timestamp(now)
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")


def compute_due_now(items_df: pd.DataFrame, now: datetime) -> int:
    """
    Count items with next_due at or before now.
    """
    if items_df.empty:
        return 0
    return int((items_df["next_due"] <= _as_timestamp(now)).sum())


def compute_overdue(items_df: pd.DataFrame, now: datetime) -> int:
    """
    Count items at least OVERDUE_THRESHOLD_DAYS whole days past due.
    """
    if items_df.empty:
        return 0
    lateness = _as_timestamp(now) - items_df["next_due"]
    return int((lateness >= pd.Timedelta(days=OVERDUE_THRESHOLD_DAYS)).sum())


def compute_mean(items_df: pd.DataFrame, column: str) -> float:
    """
    Column mean, 0.0 for an empty pool.
    """
    if items_df.empty:
        return 0.0
    return float(pd.to_numeric(items_df[column], errors="coerce").mean())


def compute_average_stability(items_df: pd.DataFrame) -> Optional[float]:
    """
    Mean FSRS stability over items that have one; None if none do.
    """
    if items_df.empty:
        return None
    stabilities = items_df["fsrs_stability"].dropna()
    if stabilities.empty:
        return None
    return float(stabilities.mean())


def compute_total_lapses(items_df: pd.DataFrame) -> int:
    if items_df.empty:
        return 0
    return int(items_df["fsrs_lapses"].fillna(0).sum())
