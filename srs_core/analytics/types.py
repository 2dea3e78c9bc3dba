"""
Types for review analytics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ReviewStats:
    """
    Dashboard summary of an item pool at one point in time.
    """
    total_items: int
    due_now: int
    overdue: int
    average_interval: float
    average_ease_factor: float
    recommended_study_size: int
    average_stability: Optional[float]  # None when no item has FSRS state
    total_lapses: int
