"""
Memory State - Learnable items, review events and scheduler updates

Defines the scheduled entity, the review outcome fed to the engines and
the update record the engines emit, plus the time helpers both engines
share.

Key concepts:
- Strength: coarse 0-100 mastery indicator
- Interval: whole days until the next scheduled review
- Stability (S): days for retrievability to decay by a factor of e
- Difficulty (D): intrinsic hardness, 1-10
- Retrievability (R): exp(-elapsed / S)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from srs_core.scheduling.constants import (
    DAY_SECONDS,
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL_DAYS,
    INITIAL_STRENGTH,
    STABILITY_FLOOR,
    RecallRating,
)
from srs_core.scheduling.ratings import coerce_rating


# ---- Time helpers ----

def utc_now() -> datetime:
    """Default clock for the service."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (e.g. read back from SQLite)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_between(start: Optional[datetime], end: datetime) -> float:
    """
    Fractional days from start to end, never negative.

    Returns 0 when there is no start timestamp.
    """
    if start is None:
        return 0.0
    return max(0.0, (end - start).total_seconds() / DAY_SECONDS)


def signed_days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end; negative when end is earlier."""
    return (end - start).total_seconds() / DAY_SECONDS


def whole_days_between(start: datetime, end: datetime) -> int:
    """Signed whole days from start to end, floored."""
    return math.floor(signed_days_between(start, end))


def add_days(moment: datetime, days: int) -> datetime:
    return moment + timedelta(days=days)


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Probability of recall after elapsed_days.

    Formula: R = exp(-Δt / S)

    Stability is floored at STABILITY_FLOOR so a zero or missing value
    can never divide by zero.
    """
    if elapsed_days <= 0:
        return 1.0
    return math.exp(-elapsed_days / max(stability, STABILITY_FLOOR))


# ---- Review history ----

@dataclass(frozen=True)
class Fresh:
    """Item that has never had a structured review."""
    last_studied: Optional[datetime] = None

    @property
    def anchor(self) -> Optional[datetime]:
        return self.last_studied


@dataclass(frozen=True)
class Reviewed:
    """Item with at least one structured review."""
    last_review: datetime

    @property
    def anchor(self) -> datetime:
        return self.last_review


ReviewHistory = Union[Fresh, Reviewed]


# ---- Items ----

@dataclass
class LearnableItem:
    """
    Scheduling state for one reviewable fact (e.g. a vocabulary word).

    Engines read items and never modify them; new state arrives only as a
    SchedulerUpdate applied wholesale by the item store.
    """
    id: str
    next_due: datetime
    strength: int = INITIAL_STRENGTH
    interval_days: int = INITIAL_INTERVAL_DAYS
    ease_factor: float = INITIAL_EASE_FACTOR

    last_studied: Optional[datetime] = None  # Any study activity
    last_review: Optional[datetime] = None   # Structured reviews only

    # FSRS-only state
    fsrs_difficulty: Optional[float] = None
    fsrs_stability: Optional[float] = None
    fsrs_lapses: Optional[int] = None
    fsrs_last_rating: Optional[RecallRating] = None
    fsrs_version: Optional[str] = None

    # Store partition (e.g. language) and display text
    scope: Optional[str] = None
    label: Optional[str] = None

    @property
    def has_fsrs_state(self) -> bool:
        return self.fsrs_difficulty is not None and self.fsrs_stability is not None


def review_history(item: LearnableItem) -> ReviewHistory:
    """Classify an item as Fresh or Reviewed from its timestamps."""
    if item.last_review is None:
        return Fresh(last_studied=item.last_studied)
    return Reviewed(last_review=item.last_review)


# ---- Engine input / output ----

@dataclass(frozen=True)
class ReviewEvent:
    """One evaluated review."""
    rating: RecallRating

    def __post_init__(self):
        object.__setattr__(self, "rating", coerce_rating(self.rating))


@dataclass(frozen=True)
class SchedulerUpdate:
    """
    Complete replacement scheduling state produced by an engine.

    last_review is the review timestamp for updates and None for
    (re-)initialization, which discards review history.
    """
    strength: int
    interval_days: int
    ease_factor: float
    next_due: datetime
    last_review: Optional[datetime] = None

    fsrs_difficulty: Optional[float] = None
    fsrs_stability: Optional[float] = None
    fsrs_lapses: Optional[int] = None
    fsrs_last_rating: Optional[RecallRating] = None
    fsrs_version: Optional[str] = None


def apply_update(item: LearnableItem, update: SchedulerUpdate) -> LearnableItem:
    """Return a copy of item with every scheduling field replaced by update."""
    return replace(
        item,
        strength=update.strength,
        interval_days=update.interval_days,
        ease_factor=update.ease_factor,
        next_due=update.next_due,
        last_review=update.last_review,
        fsrs_difficulty=update.fsrs_difficulty,
        fsrs_stability=update.fsrs_stability,
        fsrs_lapses=update.fsrs_lapses,
        fsrs_last_rating=update.fsrs_last_rating,
        fsrs_version=update.fsrs_version,
    )


# ---- Numeric helpers ----

def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return math.floor(value + 0.5)
