"""
Service layer to assemble review dashboard statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from srs_core.analytics.metrics import (
    compute_average_stability,
    compute_due_now,
    compute_mean,
    compute_overdue,
    compute_total_lapses,
)
from srs_core.analytics.queries import load_items_df
from srs_core.analytics.types import ReviewStats
from srs_core.scheduling.memory_state import LearnableItem
from srs_core.scheduling.ratings import recommended_batch_size


def build_review_stats(items: Iterable[LearnableItem], now: datetime) -> ReviewStats:
    """
    Build the dashboard summary for a pool of items.
    """
    items_df = load_items_df(items)
    due_now = compute_due_now(items_df, now)

    return ReviewStats(
        total_items=len(items_df),
        due_now=due_now,
        overdue=compute_overdue(items_df, now),
        average_interval=compute_mean(items_df, "interval_days"),
        average_ease_factor=compute_mean(items_df, "ease_factor"),
        recommended_study_size=recommended_batch_size(due_now),
        average_stability=compute_average_stability(items_df),
        total_lapses=compute_total_lapses(items_df),
    )
