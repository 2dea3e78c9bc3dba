"""
Scheduling Constants and Parameters

All tunable parameters for both scheduling algorithms in one place.
The values are empirically chosen; pass a modified ClassicParameters or
FsrsParameters to an engine to experiment with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


# ---- Recall Ratings ----

class RecallRating(IntEnum):
    """Outcome of a single review. Tables below are indexed by this ordinal."""
    FAIL = 0   # Not recalled
    HARD = 1   # Recalled with high effort
    GOOD = 2   # Recalled normally
    EASY = 3   # Recalled fluently


# ---- Shared Defaults ----

DAY_SECONDS = 86400.0

MIN_STRENGTH = 0
MAX_STRENGTH = 100
MIN_INTERVAL_DAYS = 1

INITIAL_STRENGTH = 20
INITIAL_INTERVAL_DAYS = 1
INITIAL_EASE_FACTOR = 2.5

MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 3.0


# ---- FSRS Model Bounds ----

DEFAULT_DIFFICULTY = 5.0
DEFAULT_STABILITY = 1.0
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
STABILITY_FLOOR = 0.1    # Applied to stored stability before use

FSRS_VERSION = "fsrs-baseline"


# ---- Classic (SM-2 style) Parameters ----

@dataclass(frozen=True)
class ClassicParameters:
    """Constants for the classic engine."""
    fail_ease_penalty: float = 0.2
    fail_strength_penalty: int = 20
    success_strength_step: int = 20     # Multiplied by the rating ordinal
    lateness_factor: float = 0.1        # interval *= 1 + lateness_factor * lateness_multiplier
    ease_deltas: dict[RecallRating, float] = field(default_factory=lambda: {
        RecallRating.FAIL: 0.0,
        RecallRating.HARD: 0.0,
        RecallRating.GOOD: 0.1,
        RecallRating.EASY: 0.15,
    })

    # Priority scoring
    overdue_base_priority: float = 1000.0
    overdue_day_weight: float = 10.0


# ---- FSRS-style Parameters ----

@dataclass(frozen=True)
class FsrsParameters:
    """Constants for the difficulty/stability engine."""

    # Difficulty change per rating
    difficulty_adjustments: dict[RecallRating, float] = field(default_factory=lambda: {
        RecallRating.FAIL: -1.0,
        RecallRating.HARD: -0.4,
        RecallRating.GOOD: 0.0,
        RecallRating.EASY: 0.3,
    })

    # Retention the next interval is derived for
    target_retention: dict[RecallRating, float] = field(default_factory=lambda: {
        RecallRating.FAIL: 0.5,
        RecallRating.HARD: 0.8,
        RecallRating.GOOD: 0.9,
        RecallRating.EASY: 0.95,
    })

    strength_deltas: dict[RecallRating, int] = field(default_factory=lambda: {
        RecallRating.FAIL: -30,
        RecallRating.HARD: 5,
        RecallRating.GOOD: 15,
        RecallRating.EASY: 25,
    })

    # Stability assigned on the first structured review
    learning_stability: dict[RecallRating, float] = field(default_factory=lambda: {
        RecallRating.FAIL: 0.8,
        RecallRating.HARD: 1.2,
        RecallRating.GOOD: 2.5,
        RecallRating.EASY: 4.0,
    })

    # Stability growth on successful recall
    growth_factors: dict[RecallRating, float] = field(default_factory=lambda: {
        RecallRating.HARD: 0.6,
        RecallRating.GOOD: 1.0,
        RecallRating.EASY: 1.4,
    })

    # Relative jitter applied to scheduled intervals above one day
    fuzz_ranges: dict[RecallRating, float] = field(default_factory=lambda: {
        RecallRating.FAIL: 0.05,
        RecallRating.HARD: 0.05,
        RecallRating.GOOD: 0.10,
        RecallRating.EASY: 0.15,
    })

    fail_stability_multiplier: float = 0.35
    min_review_stability: float = 0.4
    growth_cap_multiplier: float = 1.2       # S_new <= S * (1 + growth * cap)
    difficulty_pivot: float = 5.0
    difficulty_scale: float = 6.0

    # Ease factor derived from difficulty: 1.3 + (10 - D) * slope
    ease_base: float = 1.3
    ease_slope: float = 0.12

    # Priority scoring
    stability_penalty_divisor: float = 10.0
    lapse_penalty: float = 0.2
