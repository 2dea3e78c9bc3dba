"""
FSRS Updates - Difficulty/stability update rules

Pure formulas for the simplified FSRS-style model. Each function takes
plain numbers and returns plain numbers; FsrsEngine composes them.

Key principles:
- Difficulty drifts down after failures and up after easy recalls
- Stability grows most when recall succeeds despite low retrievability
- Failures shrink stability but never below a usable floor
- The next interval is the time for R to decay to the rating's target
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from srs_core.scheduling.constants import (
    MAX_DIFFICULTY,
    MAX_EASE_FACTOR,
    MAX_STRENGTH,
    MIN_DIFFICULTY,
    MIN_EASE_FACTOR,
    MIN_INTERVAL_DAYS,
    MIN_STRENGTH,
    FsrsParameters,
    RecallRating,
)
from srs_core.scheduling.memory_state import clamp, round_half_up


@dataclass(frozen=True)
class StabilityTransition:
    """Result of one stability update, with the values that produced it."""
    stability: float
    lapses: int
    branch: str                    # "learning", "fail" or "success"
    growth_factor: float = 0.0
    difficulty_factor: float = 0.0
    gain: float = 0.0
    upper_bound: float = 0.0


def update_difficulty(
    difficulty: float,
    rating: RecallRating,
    params: FsrsParameters
) -> float:
    """
    D_new = clip(D + adjustment(rating), 1, 10)
    """
    return clamp(difficulty + params.difficulty_adjustments[rating], MIN_DIFFICULTY, MAX_DIFFICULTY)


def learning_stability(
    rating: RecallRating,
    lapses: int,
    params: FsrsParameters
) -> StabilityTransition:
    """
    First structured review: stability comes from a fixed table.

    A failed first review counts as a lapse.
    """
    if rating == RecallRating.FAIL:
        lapses += 1
    return StabilityTransition(
        stability=params.learning_stability[rating],
        lapses=lapses,
        branch="learning",
    )


def stability_on_failure(
    stability: float,
    lapses: int,
    params: FsrsParameters
) -> StabilityTransition:
    """
    S_new = max(0.4, S * 0.35)
    """
    new_stability = max(
        params.min_review_stability,
        stability * params.fail_stability_multiplier
    )
    return StabilityTransition(stability=new_stability, lapses=lapses + 1, branch="fail")


def stability_on_success(
    stability: float,
    new_difficulty: float,
    retrievability: float,
    rating: RecallRating,
    lapses: int,
    params: FsrsParameters
) -> StabilityTransition:
    """
    Grow stability after a successful recall (Hard/Good/Easy).

    Formula:
        f(D)  = exp(-(D_new - 5) / 6)
        gain  = S * growth(rating) * f(D) * (1 - R)
        S_new = clip(S + gain, 0.4, S * (1 + growth * 1.2))

    Where:
        - (1 - R) rewards recall that happened late in the forgetting curve
        - f(D) shrinks gains for difficult items

    Args:
        stability: Current stability (floored)
        new_difficulty: Difficulty after this review's adjustment
        retrievability: Retrievability at review time
        rating: HARD, GOOD or EASY
        lapses: Current lapse count (unchanged on success)
        params: Model parameters

    Returns:
        StabilityTransition for the success branch
    """
    if rating == RecallRating.FAIL:
        raise ValueError("Use stability_on_failure for FAIL ratings")

    growth_factor = params.growth_factors[rating]
    difficulty_factor = math.exp(-(new_difficulty - params.difficulty_pivot) / params.difficulty_scale)
    gain = stability * growth_factor * difficulty_factor * (1.0 - retrievability)
    upper_bound = stability * (1 + growth_factor * params.growth_cap_multiplier)
    # Upper bound wins if the floor ever exceeds it (tiny stabilities)
    new_stability = min(max(stability + gain, params.min_review_stability), upper_bound)

    return StabilityTransition(
        stability=new_stability,
        lapses=lapses,
        branch="success",
        growth_factor=growth_factor,
        difficulty_factor=difficulty_factor,
        gain=gain,
        upper_bound=upper_bound,
    )


def raw_interval_days(stability: float, rating: RecallRating, params: FsrsParameters) -> float:
    """
    Days until R decays to the rating's target retention.

    Formula: I = -S * ln(target_retention)
    """
    return -stability * math.log(params.target_retention[rating])


def scheduled_interval_days(raw_interval: float, rating: RecallRating) -> int:
    """Failures come back tomorrow; otherwise round, at least one day."""
    if rating == RecallRating.FAIL:
        return MIN_INTERVAL_DAYS
    return max(MIN_INTERVAL_DAYS, round_half_up(raw_interval))


def fuzz_bounds(interval_days: int, rating: RecallRating, params: FsrsParameters) -> tuple[float, float]:
    fuzz_range = params.fuzz_ranges[rating]
    return interval_days * (1 - fuzz_range), interval_days * (1 + fuzz_range)


def apply_interval_fuzz(
    interval_days: int,
    rating: RecallRating,
    rng: random.Random,
    params: FsrsParameters
) -> int:
    """
    Jitter an interval so items scheduled together spread over nearby days.

    Intervals of one day or less are returned unchanged.
    """
    if interval_days <= MIN_INTERVAL_DAYS:
        return interval_days

    low, high = fuzz_bounds(interval_days, rating, params)
    return max(MIN_INTERVAL_DAYS, round_half_up(rng.uniform(low, high)))


def updated_strength(strength: int, rating: RecallRating, params: FsrsParameters) -> int:
    return int(clamp(strength + params.strength_deltas[rating], MIN_STRENGTH, MAX_STRENGTH))


def ease_from_difficulty(difficulty: float, params: FsrsParameters) -> float:
    """
    Classic-compatible ease factor derived from difficulty.

    Formula: EF = clip(1.3 + (10 - D) * 0.12, 1.3, 3.0)
    """
    return clamp(
        params.ease_base + (MAX_DIFFICULTY - difficulty) * params.ease_slope,
        MIN_EASE_FACTOR,
        MAX_EASE_FACTOR
    )


def priority_score(
    overdue_days: float,
    retrievability: float,
    stability: float,
    difficulty: float,
    lapses: int,
    params: FsrsParameters
) -> float:
    """
    Review priority: overdue items first, then hard, unstable, lapse-free ones.

    Formula:
        due_bonus         = overdue_days + 1     (if overdue, else 0)
        future_penalty    = -R                   (if not overdue, else 0)
        difficulty_bonus  = (10 - D) / 10
        stability_penalty = S / 10
        lapse_penalty     = lapses * 0.2
        priority = due_bonus + future_penalty + difficulty_bonus
                   - stability_penalty - lapse_penalty
    """
    due_bonus = overdue_days + 1 if overdue_days > 0 else 0.0
    future_penalty = -retrievability if overdue_days <= 0 else 0.0
    difficulty_bonus = (MAX_DIFFICULTY - difficulty) / 10
    stability_penalty = stability / params.stability_penalty_divisor
    lapse_penalty = lapses * params.lapse_penalty

    return due_bonus + future_penalty + difficulty_bonus - stability_penalty - lapse_penalty
