"""
FSRS Engine - Difficulty/stability scheduling

A simplified, FSRS-inspired model (not the reference FSRS algorithm):

1. Measure elapsed time since the last review (or study) and derive R
2. Adjust difficulty by rating
3. Update stability: learning table, failure shrink, or success growth
4. Derive the interval that decays R to the rating's target retention
5. Jitter the interval with an injectable random source

Randomness is only consumed by interval fuzz. Every engine owns its own
random.Random and callers may pass one per call, so concurrent use never
shares a module-level generator.
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import Any, Optional

from srs_core.scheduling import fsrs_updates
from srs_core.scheduling.constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_STABILITY,
    FSRS_VERSION,
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL_DAYS,
    INITIAL_STRENGTH,
    STABILITY_FLOOR,
    FsrsParameters,
    RecallRating,
)
from srs_core.scheduling.engine import EngineName, SchedulerEngine
from srs_core.scheduling.memory_state import (
    Fresh,
    LearnableItem,
    ReviewEvent,
    SchedulerUpdate,
    add_days,
    calculate_retrievability,
    days_between,
    review_history,
    signed_days_between,
)
from srs_core.scheduling.ratings import coerce_rating


def _memory_state(item: LearnableItem) -> tuple[float, float, int]:
    """(difficulty, stability, lapses) with defaults for missing FSRS fields."""
    difficulty = item.fsrs_difficulty if item.fsrs_difficulty is not None else DEFAULT_DIFFICULTY
    stability = item.fsrs_stability if item.fsrs_stability is not None else DEFAULT_STABILITY
    lapses = item.fsrs_lapses if item.fsrs_lapses is not None else 0
    return difficulty, max(stability, STABILITY_FLOOR), lapses


class FsrsEngine(SchedulerEngine):
    """Difficulty/stability engine with retrievability-based intervals."""

    name = EngineName.FSRS

    def __init__(
        self,
        params: Optional[FsrsParameters] = None,
        rng: Optional[random.Random] = None
    ):
        self.params = params or FsrsParameters()
        self.rng = rng if rng is not None else random.Random()

    def initialize(self, now: datetime) -> SchedulerUpdate:
        return SchedulerUpdate(
            strength=INITIAL_STRENGTH,
            interval_days=INITIAL_INTERVAL_DAYS,
            ease_factor=INITIAL_EASE_FACTOR,
            next_due=add_days(now, INITIAL_INTERVAL_DAYS),
            fsrs_difficulty=DEFAULT_DIFFICULTY,
            fsrs_stability=DEFAULT_STABILITY,
            fsrs_lapses=0,
            fsrs_last_rating=None,
            fsrs_version=FSRS_VERSION,
        )

    def update(
        self,
        item: LearnableItem,
        review: ReviewEvent,
        now: datetime,
        rng: Optional[random.Random] = None
    ) -> SchedulerUpdate:
        update, _ = self.explain(item, review, now, rng=rng)
        return update

    def explain(
        self,
        item: LearnableItem,
        review: ReviewEvent,
        now: datetime,
        rng: Optional[random.Random] = None
    ) -> tuple[SchedulerUpdate, dict[str, Any]]:
        """
        Apply one review and return (update, trace).

        Args:
            item: Current item state (not modified)
            review: Review outcome
            now: Review timestamp
            rng: Random source for interval fuzz (defaults to the engine's)

        Returns:
            (update, trace) where trace holds every intermediate value
        """
        rating = coerce_rating(review.rating)
        params = self.params
        rng = rng if rng is not None else self.rng

        difficulty, stability, lapses = _memory_state(item)
        history = review_history(item)
        elapsed_days = days_between(history.anchor, now)
        retrievability = calculate_retrievability(stability, elapsed_days)

        new_difficulty = fsrs_updates.update_difficulty(difficulty, rating, params)

        if isinstance(history, Fresh):
            transition = fsrs_updates.learning_stability(rating, lapses, params)
        elif rating == RecallRating.FAIL:
            transition = fsrs_updates.stability_on_failure(stability, lapses, params)
        else:
            transition = fsrs_updates.stability_on_success(
                stability, new_difficulty, retrievability, rating, lapses, params
            )

        raw_interval = fsrs_updates.raw_interval_days(transition.stability, rating, params)
        scheduled_interval = fsrs_updates.scheduled_interval_days(raw_interval, rating)
        fuzzed_interval = fsrs_updates.apply_interval_fuzz(scheduled_interval, rating, rng, params)

        strength = fsrs_updates.updated_strength(item.strength, rating, params)
        ease_factor = fsrs_updates.ease_from_difficulty(new_difficulty, params)

        update = SchedulerUpdate(
            strength=strength,
            interval_days=fuzzed_interval,
            ease_factor=ease_factor,
            next_due=add_days(now, fuzzed_interval),
            last_review=now,
            fsrs_difficulty=new_difficulty,
            fsrs_stability=transition.stability,
            fsrs_lapses=transition.lapses,
            fsrs_last_rating=rating,
            fsrs_version=FSRS_VERSION,
        )

        fuzz_low, fuzz_high = fsrs_updates.fuzz_bounds(scheduled_interval, rating, params)
        trace = {
            "engine": self.name.value,
            "item_id": item.id,
            "rating": rating.name,
            "phase": "learning" if isinstance(history, Fresh) else "review",
            "elapsed_days": elapsed_days,
            "retrievability": retrievability,
            "difficulty_before": difficulty,
            "difficulty_adjustment": params.difficulty_adjustments[rating],
            "difficulty_after": new_difficulty,
            "stability_before": stability,
            "stability_branch": transition.branch,
            "growth_factor": transition.growth_factor,
            "difficulty_factor": transition.difficulty_factor,
            "stability_gain": transition.gain,
            "stability_upper_bound": transition.upper_bound,
            "stability_after": transition.stability,
            "lapses_before": lapses,
            "lapses_after": transition.lapses,
            "target_retention": params.target_retention[rating],
            "raw_interval_days": raw_interval,
            "scheduled_interval_days": scheduled_interval,
            "fuzz_bounds": (fuzz_low, fuzz_high) if scheduled_interval > 1 else None,
            "fuzzed_interval_days": fuzzed_interval,
            "strength_before": item.strength,
            "strength_after": strength,
            "ease_after": ease_factor,
        }
        return update, trace

    def priority(self, item: LearnableItem, now: datetime) -> float:
        difficulty, stability, lapses = _memory_state(item)
        overdue_days = signed_days_between(item.next_due, now)
        elapsed = days_between(review_history(item).anchor, now)
        retrievability = calculate_retrievability(stability, elapsed)

        return fsrs_updates.priority_score(
            overdue_days, retrievability, stability, difficulty, lapses, self.params
        )
