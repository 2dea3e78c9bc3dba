"""
Scheduler Service - Applies reviews through the configured engine

Orchestration only: load an item from the item store, resolve the active
engine from configuration, compute the update, hand it back to the store.

The algorithm preference is read on every call, so switching between
classic and FSRS takes effect on the next operation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from srs_core.scheduling.classic_engine import ClassicEngine
from srs_core.scheduling.constants import INITIAL_EASE_FACTOR, INITIAL_INTERVAL_DAYS
from srs_core.scheduling.engine import EngineName, SchedulerEngine, parse_engine_name
from srs_core.scheduling.exceptions import ConfigReadError, ItemNotFoundError
from srs_core.scheduling.fsrs_engine import FsrsEngine
from srs_core.scheduling.memory_state import (
    LearnableItem,
    ReviewEvent,
    SchedulerUpdate,
    utc_now,
)
from srs_core.scheduling.ratings import rating_for_mark, rating_from_quiz, recommended_batch_size
from srs_core.scheduling.stores import Clock, ConfigStore, ItemStore

logger = logging.getLogger(__name__)


# Extra FSRS candidates fetched beyond the batch size for re-ranking
FSRS_POOL_MULTIPLIER = 3
FSRS_POOL_MAX_EXTRA = 50


@dataclass(frozen=True)
class QuizResult:
    """One answered quiz question, before conversion to a rating."""
    item_id: str
    correct: bool
    response_time_ms: Optional[float] = None
    difficulty: Optional[str] = None


@dataclass(frozen=True)
class BatchOutcome:
    """Per-item result of process_batch: the applied update or the error."""
    item_id: str
    update: Optional[SchedulerUpdate] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_quiz_result(result: Union[QuizResult, Mapping[str, Any]]) -> QuizResult:
    if isinstance(result, QuizResult):
        return result
    return QuizResult(
        item_id=result["item_id"],
        correct=bool(result["correct"]),
        response_time_ms=result.get("response_time_ms"),
        difficulty=result.get("difficulty"),
    )


def candidate_pool_size(limit: int, engine: SchedulerEngine) -> int:
    """
    Number of due items to fetch before ranking.

    FSRS over-fetches so priority re-ranking can pull in items the store's
    due-date order would have cut off; classic fetches exactly limit.
    """
    if engine.name is EngineName.FSRS:
        return max(min(limit * FSRS_POOL_MULTIPLIER, limit + FSRS_POOL_MAX_EXTRA), limit)
    return limit


class SchedulerService:
    """
    Entry point for callers: reviews, due batches, resets and migration.

    Args:
        item_store: ItemStore implementation
        config_store: ConfigStore providing the algorithm preference
        clock: Callable returning the current UTC time
        classic: ClassicEngine to use (default parameters if omitted)
        fsrs: FsrsEngine to use (default parameters if omitted)
    """

    def __init__(
        self,
        item_store: ItemStore,
        config_store: ConfigStore,
        clock: Optional[Clock] = None,
        classic: Optional[ClassicEngine] = None,
        fsrs: Optional[FsrsEngine] = None
    ):
        self.item_store = item_store
        self.config_store = config_store
        self.clock = clock or utc_now
        self.engines: dict[EngineName, SchedulerEngine] = {
            EngineName.CLASSIC: classic or ClassicEngine(),
            EngineName.FSRS: fsrs or FsrsEngine(),
        }

    # ---- Engine resolution ----

    def active_engine(self) -> SchedulerEngine:
        """Engine named by the current configuration; classic on any failure."""
        try:
            preference = self.config_store.get_algorithm_preference()
        except Exception as exc:
            error = ConfigReadError(f"Could not read algorithm preference: {exc!r}")
            logger.warning("%s; using classic scheduling", error)
            return self.engines[EngineName.CLASSIC]
        return self.engines[parse_engine_name(preference)]

    # ---- Reviews ----

    def _load(self, item_id: str) -> LearnableItem:
        item = self.item_store.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def _review(
        self,
        engine: SchedulerEngine,
        item_id: str,
        review: ReviewEvent
    ) -> SchedulerUpdate:
        item = self._load(item_id)
        now = self.clock()
        update, trace = engine.explain(item, review, now)
        logger.debug("Scheduler trace: %s", trace)
        self.item_store.update(item_id, update)
        logger.info(
            "Reviewed %s with %s (%s): interval %sd, next due %s",
            item_id, review.rating.name, engine.name.value,
            update.interval_days, update.next_due.isoformat()
        )
        return update

    def process_review(self, item_id: str, review: Union[ReviewEvent, int]) -> SchedulerUpdate:
        """
        Apply one review to an item and persist the result.

        Raises:
            ItemNotFoundError: If item_id is not in the store
            InvalidRatingError: If the rating is outside FAIL..EASY
        """
        if not isinstance(review, ReviewEvent):
            review = ReviewEvent(review)
        return self._review(self.active_engine(), item_id, review)

    def process_batch(
        self,
        results: Iterable[Union[QuizResult, Mapping[str, Any]]]
    ) -> list[BatchOutcome]:
        """
        Apply a list of quiz results in order.

        Each result is converted to a rating and reviewed independently; a
        failure is logged and recorded in that item's outcome without
        stopping the rest of the batch.

        Returns:
            One BatchOutcome per input, in input order
        """
        results = list(results)
        if not results:
            return []

        engine = self.active_engine()
        outcomes = []
        for raw in results:
            item_id = raw.item_id if isinstance(raw, QuizResult) else raw.get("item_id")
            try:
                result = _as_quiz_result(raw)
                rating = rating_from_quiz(
                    result.correct, result.response_time_ms, result.difficulty
                )
                update = self._review(engine, result.item_id, ReviewEvent(rating))
            except Exception as exc:
                logger.warning("Batch review failed for %s: %s", item_id, exc)
                outcomes.append(BatchOutcome(item_id=item_id, error=exc))
            else:
                outcomes.append(BatchOutcome(item_id=item_id, update=update))
        return outcomes

    def mark_difficulty(self, item_id: str, mark: str) -> SchedulerUpdate:
        """Shorthand review: 'easy' -> EASY, 'hard' -> HARD."""
        return self.process_review(item_id, ReviewEvent(rating_for_mark(mark)))

    def reset_progress(self, item_id: str) -> SchedulerUpdate:
        """Re-initialize an item with the active engine, discarding its history."""
        self._load(item_id)
        engine = self.active_engine()
        update = engine.initialize(self.clock())
        self.item_store.update(item_id, update)
        logger.info("Reset progress for %s (%s)", item_id, engine.name.value)
        return update

    # ---- Queues ----

    def get_due_batch(
        self,
        max_items: Optional[int] = None,
        scope: Optional[str] = None
    ) -> list[LearnableItem]:
        """
        Next study batch, highest priority first.

        The batch size follows recommended_batch_size for the current due
        count, further capped by max_items when given.
        """
        engine = self.active_engine()
        now = self.clock()

        recommended = recommended_batch_size(self.item_store.count_due(now, scope))
        limit = recommended if max_items is None else min(max_items, recommended)
        if limit <= 0:
            return []

        candidates = self.item_store.query_due(now, scope, candidate_pool_size(limit, engine))
        return engine.sort_by_priority(candidates, now)[:limit]

    def get_overdue(self, scope: Optional[str] = None) -> list[LearnableItem]:
        """Items the active engine considers due right now."""
        engine = self.active_engine()
        now = self.clock()
        return [
            item for item in self.item_store.query_due(now, scope)
            if engine.is_due(item, now)
        ]

    # ---- Maintenance ----

    @staticmethod
    def _is_stale(item: LearnableItem, engine: SchedulerEngine) -> bool:
        never_initialized = (
            item.last_review is None
            and item.interval_days == INITIAL_INTERVAL_DAYS
            and item.ease_factor == INITIAL_EASE_FACTOR
        )
        if never_initialized:
            return True
        return engine.name is EngineName.FSRS and not item.has_fsrs_state

    def bulk_initialize_stale(self, scope: Optional[str] = None) -> int:
        """
        Re-initialize items that were never scheduled (or, under FSRS, that
        carry no FSRS state). One-time migration helper after switching
        algorithms.

        Returns:
            Number of items updated
        """
        engine = self.active_engine()
        now = self.clock()

        updated = 0
        for item in self.item_store.query_all(scope):
            if not self._is_stale(item, engine):
                continue
            self.item_store.update(item.id, engine.initialize(now))
            updated += 1

        logger.info(
            "Initialized %d stale items (%s, scope=%s)", updated, engine.name.value, scope
        )
        return updated

    def get_dashboard_stats(self, scope: Optional[str] = None):
        """ReviewStats for every item in scope."""
        from srs_core.analytics.service import build_review_stats

        return build_review_stats(self.item_store.query_all(scope), self.clock())
