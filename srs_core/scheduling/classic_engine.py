"""
Classic Engine - SM-2 style scheduling

Updates ease factor, interval and strength from a recall rating, with a
bonus for reviews done late: the more overdue a successful review, the
larger the next interval.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from srs_core.scheduling.constants import (
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL_DAYS,
    INITIAL_STRENGTH,
    MAX_EASE_FACTOR,
    MAX_STRENGTH,
    MIN_EASE_FACTOR,
    MIN_INTERVAL_DAYS,
    MIN_STRENGTH,
    ClassicParameters,
    RecallRating,
)
from srs_core.scheduling.engine import EngineName, SchedulerEngine
from srs_core.scheduling.memory_state import (
    LearnableItem,
    ReviewEvent,
    SchedulerUpdate,
    add_days,
    clamp,
    round_half_up,
    whole_days_between,
)
from srs_core.scheduling.ratings import coerce_rating


class ClassicEngine(SchedulerEngine):
    """SM-2 style engine: ease factor, interval, strength, lateness bonus."""

    name = EngineName.CLASSIC

    def __init__(self, params: Optional[ClassicParameters] = None):
        self.params = params or ClassicParameters()

    def initialize(self, now: datetime) -> SchedulerUpdate:
        return SchedulerUpdate(
            strength=INITIAL_STRENGTH,
            interval_days=INITIAL_INTERVAL_DAYS,
            ease_factor=INITIAL_EASE_FACTOR,
            next_due=add_days(now, INITIAL_INTERVAL_DAYS),
        )

    def explain(
        self,
        item: LearnableItem,
        review: ReviewEvent,
        now: datetime
    ) -> tuple[SchedulerUpdate, dict[str, Any]]:
        """
        Apply one review.

        Fail:    interval -> 1, ease -= 0.2 (floor 1.3), strength -= 20 (floor 0)
        Success: ease += delta(rating),
                 interval = round(interval * ease * (1 + 0.1 * lateness)),
                 at least old interval + 1,
                 strength += 20 * rating (cap 100)

        FSRS fields are carried over untouched so switching algorithms
        keeps the other engine's state.

        Returns:
            (update, trace) where trace holds the intermediate values
        """
        rating = coerce_rating(review.rating)
        params = self.params

        old_interval = max(MIN_INTERVAL_DAYS, item.interval_days)
        days_late = max(0, whole_days_between(item.next_due, now))
        lateness_multiplier = max(1.0, 1 + days_late / old_interval)

        if rating == RecallRating.FAIL:
            ease_delta = -params.fail_ease_penalty
            interval_days = MIN_INTERVAL_DAYS
            strength = item.strength - params.fail_strength_penalty
        else:
            ease_delta = params.ease_deltas[rating]
            grown_ease = clamp(item.ease_factor + ease_delta, MIN_EASE_FACTOR, MAX_EASE_FACTOR)
            raw_interval = old_interval * grown_ease * (1 + params.lateness_factor * lateness_multiplier)
            # Success must always lengthen the interval
            interval_days = max(round_half_up(raw_interval), old_interval + 1)
            strength = item.strength + params.success_strength_step * int(rating)

        ease_factor = clamp(item.ease_factor + ease_delta, MIN_EASE_FACTOR, MAX_EASE_FACTOR)
        strength = int(clamp(strength, MIN_STRENGTH, MAX_STRENGTH))

        update = SchedulerUpdate(
            strength=strength,
            interval_days=interval_days,
            ease_factor=ease_factor,
            next_due=add_days(now, interval_days),
            last_review=now,
            fsrs_difficulty=item.fsrs_difficulty,
            fsrs_stability=item.fsrs_stability,
            fsrs_lapses=item.fsrs_lapses,
            fsrs_last_rating=item.fsrs_last_rating,
            fsrs_version=item.fsrs_version,
        )
        trace = {
            "engine": self.name.value,
            "item_id": item.id,
            "rating": rating.name,
            "days_late": days_late,
            "lateness_multiplier": lateness_multiplier,
            "ease_delta": ease_delta,
            "interval_before": item.interval_days,
            "interval_after": interval_days,
            "ease_before": item.ease_factor,
            "ease_after": ease_factor,
            "strength_before": item.strength,
            "strength_after": strength,
        }
        return update, trace

    def priority(self, item: LearnableItem, now: datetime) -> float:
        """
        Overdue:   1000 + days_overdue * 10 + (100 - strength)
        Due today: 100 - strength
        Future:    -days_until_due
        """
        days_overdue = max(0, whole_days_between(item.next_due, now))
        weakness = MAX_STRENGTH - item.strength

        if days_overdue > 0:
            return (
                self.params.overdue_base_priority
                + days_overdue * self.params.overdue_day_weight
                + weakness
            )
        if item.next_due <= now:
            return float(weakness)
        return float(-whole_days_between(now, item.next_due))
