"""
Tests for SchedulerService

Tests cover:
- Per-call engine resolution and config read failures
- Reviews, marks, resets and NotFound
- Batch processing with per-item isolation
- Due batches, overdue filtering, stale initialization
"""

import logging
from datetime import timedelta

import pytest

from srs_core.scheduling import (
    ClassicEngine,
    EngineName,
    FsrsEngine,
    InMemoryItemStore,
    InvalidRatingError,
    ItemNotFoundError,
    QuizResult,
    RecallRating,
    ReviewEvent,
    SchedulerService,
    StaticConfigStore,
)
from srs_core.scheduling.service import candidate_pool_size


class ExplodingConfigStore:
    def get_algorithm_preference(self):
        raise RuntimeError("settings table unavailable")


class RecordingItemStore(InMemoryItemStore):
    """Remembers the limits query_due was called with."""

    def __init__(self, items=None):
        super().__init__(items)
        self.due_limits = []

    def query_due(self, now, scope=None, limit=None):
        self.due_limits.append(limit)
        return super().query_due(now, scope, limit)


@pytest.fixture
def config():
    return StaticConfigStore("classic")


@pytest.fixture
def service(memory_store, config, clock, rng):
    return SchedulerService(memory_store, config, clock=clock, fsrs=FsrsEngine(rng=rng))


class TestEngineResolution:

    @pytest.mark.parametrize("preference, expected", [
        ("classic", EngineName.CLASSIC),
        ("fsrs", EngineName.FSRS),
        ("  FSRS ", EngineName.FSRS),
        ("sm2", EngineName.CLASSIC),
        ("", EngineName.CLASSIC),
        (None, EngineName.CLASSIC),
    ])
    def test_preference(self, memory_store, preference, expected):
        service = SchedulerService(memory_store, StaticConfigStore(preference))
        assert service.active_engine().name is expected

    def test_read_failure_falls_back_to_classic(self, memory_store, caplog):
        service = SchedulerService(memory_store, ExplodingConfigStore())
        with caplog.at_level(logging.WARNING, logger="srs_core.scheduling.service"):
            engine = service.active_engine()

        assert isinstance(engine, ClassicEngine)
        assert "settings table unavailable" in caplog.text

    def test_review_survives_config_failure(self, memory_store, make_item, clock):
        memory_store.add(make_item("w"))
        service = SchedulerService(memory_store, ExplodingConfigStore(), clock=clock)
        update = service.process_review("w", ReviewEvent(RecallRating.GOOD))
        assert update.fsrs_version is None

    def test_switch_takes_effect_on_next_call(self, service, config, memory_store, make_item):
        memory_store.add(make_item("a"))
        memory_store.add(make_item("b"))

        first = service.process_review("a", ReviewEvent(RecallRating.GOOD))
        config.set_algorithm_preference("fsrs")
        second = service.process_review("b", ReviewEvent(RecallRating.GOOD))

        assert first.fsrs_version is None
        assert second.fsrs_version is not None


class TestProcessReview:

    def test_persists_update(self, service, memory_store, make_item, clock):
        memory_store.add(make_item("w"))
        update = service.process_review("w", ReviewEvent(RecallRating.EASY))

        stored = memory_store.get("w")
        assert stored.strength == update.strength == 80
        assert stored.next_due == update.next_due
        assert stored.last_review == clock()

    def test_accepts_plain_ordinal(self, service, memory_store, make_item):
        memory_store.add(make_item("w"))
        assert service.process_review("w", 0).interval_days == 1

    def test_not_found(self, service):
        with pytest.raises(ItemNotFoundError) as excinfo:
            service.process_review("missing", ReviewEvent(RecallRating.GOOD))
        assert excinfo.value.item_id == "missing"

    def test_invalid_rating(self, service, memory_store, make_item):
        memory_store.add(make_item("w"))
        with pytest.raises(InvalidRatingError):
            service.process_review("w", 4)

    def test_logs_trace_at_debug(self, service, memory_store, make_item, caplog):
        memory_store.add(make_item("w"))
        with caplog.at_level(logging.DEBUG, logger="srs_core.scheduling.service"):
            service.process_review("w", ReviewEvent(RecallRating.GOOD))
        assert "lateness_multiplier" in caplog.text


class TestMarkAndReset:

    def test_mark_easy(self, service, memory_store, make_item):
        memory_store.add(make_item("w"))
        update = service.mark_difficulty("w", "easy")
        assert update.strength == 80

    def test_mark_hard(self, service, memory_store, make_item):
        memory_store.add(make_item("w"))
        update = service.mark_difficulty("w", "hard")
        assert update.strength == 40

    def test_mark_not_found(self, service):
        with pytest.raises(ItemNotFoundError):
            service.mark_difficulty("missing", "easy")

    def test_reset_discards_history(self, service, memory_store, make_item, clock):
        memory_store.add(make_item("w", strength=90, interval_days=40, ease_factor=2.9,
                                   last_review=clock() - timedelta(days=40)))
        service.reset_progress("w")

        stored = memory_store.get("w")
        assert (stored.strength, stored.interval_days, stored.ease_factor) == (20, 1, 2.5)
        assert stored.last_review is None
        assert stored.next_due == clock() + timedelta(days=1)

    def test_reset_is_idempotent(self, service, memory_store, make_item):
        memory_store.add(make_item("w"))
        assert service.reset_progress("w") == service.reset_progress("w")

    def test_reset_under_fsrs_sets_state(self, service, config, memory_store, make_item):
        memory_store.add(make_item("w"))
        config.set_algorithm_preference("fsrs")
        service.reset_progress("w")
        assert memory_store.get("w").has_fsrs_state

    def test_reset_not_found(self, service):
        with pytest.raises(ItemNotFoundError):
            service.reset_progress("missing")


class TestProcessBatch:

    def test_empty(self, service):
        assert service.process_batch([]) == []

    def test_maps_quiz_results(self, service, memory_store, make_item):
        for item_id in ("fast", "slow", "wrong", "tagged"):
            memory_store.add(make_item(item_id))

        outcomes = service.process_batch([
            QuizResult("fast", True, response_time_ms=1200),
            QuizResult("slow", True, response_time_ms=9500),
            {"item_id": "wrong", "correct": False},
            {"item_id": "tagged", "correct": True, "difficulty": "medium"},
        ])

        assert [o.item_id for o in outcomes] == ["fast", "slow", "wrong", "tagged"]
        assert all(o.ok for o in outcomes)
        # Classic strength: 20 + 20 * rating, or 20 - 20 on fail
        assert [o.update.strength for o in outcomes] == [80, 40, 0, 60]

    def test_one_failure_does_not_abort(self, service, memory_store, make_item, caplog):
        memory_store.add(make_item("a"))
        memory_store.add(make_item("c"))

        with caplog.at_level(logging.WARNING, logger="srs_core.scheduling.service"):
            outcomes = service.process_batch([
                QuizResult("a", True),
                QuizResult("missing", True),
                QuizResult("c", True, difficulty="bogus"),
                QuizResult("c", False),
            ])

        assert [o.ok for o in outcomes] == [True, False, False, True]
        assert isinstance(outcomes[1].error, ItemNotFoundError)
        assert isinstance(outcomes[2].error, InvalidRatingError)
        assert memory_store.get("a").last_review is not None
        assert memory_store.get("c").strength == 0
        assert "missing" in caplog.text


class TestGetDueBatch:

    def _fill(self, store, make_item, clock, due, future=0):
        for i in range(due):
            store.add(make_item(f"due-{i:03d}", strength=i % 100,
                                next_due=clock() - timedelta(hours=i + 1)))
        for i in range(future):
            store.add(make_item(f"future-{i:03d}", next_due=clock() + timedelta(days=i + 1)))

    def test_small_backlog_returns_all(self, service, memory_store, make_item, clock):
        self._fill(memory_store, make_item, clock, due=8, future=5)
        batch = service.get_due_batch()
        assert len(batch) == 8
        assert all(item.id.startswith("due-") for item in batch)

    @pytest.mark.parametrize("due, expected", [(10, 10), (12, 12), (30, 20), (80, 25)])
    def test_recommended_size(self, service, memory_store, make_item, clock, due, expected):
        self._fill(memory_store, make_item, clock, due=due)
        assert len(service.get_due_batch()) == expected

    def test_max_items_caps_batch(self, service, memory_store, make_item, clock):
        self._fill(memory_store, make_item, clock, due=30)
        assert len(service.get_due_batch(max_items=5)) == 5

    def test_nothing_due(self, service, memory_store, make_item, clock):
        self._fill(memory_store, make_item, clock, due=0, future=3)
        assert service.get_due_batch() == []

    def test_scope(self, service, memory_store, make_item, clock):
        memory_store.add(make_item("nl-1", scope="nl", next_due=clock()))
        memory_store.add(make_item("de-1", scope="de", next_due=clock()))
        assert [i.id for i in service.get_due_batch(scope="nl")] == ["nl-1"]

    def test_classic_ranks_by_priority(self, service, memory_store, make_item, clock):
        memory_store.add(make_item("strong", strength=90, next_due=clock() - timedelta(hours=1)))
        memory_store.add(make_item("overdue", strength=90, next_due=clock() - timedelta(days=3)))
        memory_store.add(make_item("weak", strength=10, next_due=clock() - timedelta(hours=2)))

        assert [i.id for i in service.get_due_batch()] == ["overdue", "weak", "strong"]

    def test_classic_fetches_exact_limit(self, config, make_item, clock):
        store = RecordingItemStore()
        self._fill(store, make_item, clock, due=30)
        SchedulerService(store, config, clock=clock).get_due_batch()
        assert store.due_limits == [20]

    def test_fsrs_overfetches(self, make_item, clock):
        store = RecordingItemStore()
        self._fill(store, make_item, clock, due=80)
        batch = SchedulerService(store, StaticConfigStore("fsrs"), clock=clock).get_due_batch()
        assert store.due_limits == [75]
        assert len(batch) == 25

    @pytest.mark.parametrize("limit, expected", [(1, 3), (10, 30), (25, 75), (40, 90)])
    def test_fsrs_pool_size(self, limit, expected):
        assert candidate_pool_size(limit, FsrsEngine()) == expected

    def test_classic_pool_size(self):
        assert candidate_pool_size(25, ClassicEngine()) == 25


class TestGetOverdue:

    def test_excludes_future(self, service, memory_store, make_item, clock):
        memory_store.add(make_item("past", next_due=clock() - timedelta(days=2)))
        memory_store.add(make_item("now", next_due=clock()))
        memory_store.add(make_item("soon", next_due=clock() + timedelta(minutes=1)))

        assert {i.id for i in service.get_overdue()} == {"past", "now"}

    def test_scope(self, service, memory_store, make_item, clock):
        memory_store.add(make_item("nl", scope="nl", next_due=clock() - timedelta(days=1)))
        memory_store.add(make_item("de", scope="de", next_due=clock() - timedelta(days=1)))
        assert [i.id for i in service.get_overdue(scope="de")] == ["de"]


class TestBulkInitializeStale:

    @pytest.fixture
    def pool(self, memory_store, make_item, clock):
        reviewed_at = clock() - timedelta(days=3)
        memory_store.add(make_item("untouched", next_due=clock() - timedelta(days=30)))
        memory_store.add(make_item("reviewed", strength=60, interval_days=4, ease_factor=2.6,
                                   last_review=reviewed_at))
        memory_store.add(make_item("fsrs-ready", strength=45, interval_days=3, ease_factor=1.8,
                                   last_review=reviewed_at, fsrs_difficulty=5.3,
                                   fsrs_stability=4.0, fsrs_lapses=0))
        return memory_store

    def test_classic_only_touches_defaults(self, service, pool, clock):
        assert service.bulk_initialize_stale() == 1
        assert pool.get("untouched").next_due == clock() + timedelta(days=1)
        assert pool.get("reviewed").interval_days == 4

    def test_fsrs_also_initializes_missing_state(self, service, config, pool):
        config.set_algorithm_preference("fsrs")
        assert service.bulk_initialize_stale() == 2

        assert pool.get("reviewed").has_fsrs_state
        assert pool.get("untouched").fsrs_stability == 1.0
        assert pool.get("fsrs-ready").fsrs_stability == 4.0

    def test_scope(self, service, memory_store, make_item):
        memory_store.add(make_item("nl", scope="nl"))
        memory_store.add(make_item("de", scope="de"))
        assert service.bulk_initialize_stale(scope="nl") == 1

    def test_empty_store(self, service):
        assert service.bulk_initialize_stale() == 0


class TestDashboardStats:

    def test_delegates_to_analytics(self, service, memory_store, make_item, clock):
        memory_store.add(make_item("a", next_due=clock() - timedelta(days=2)))
        memory_store.add(make_item("b", next_due=clock() + timedelta(days=2)))

        stats = service.get_dashboard_stats()
        assert stats.total_items == 2
        assert stats.due_now == 1
        assert stats.overdue == 1
