import random
from datetime import datetime, timedelta, timezone

import pytest

from srs_core.scheduling import (
    ClassicEngine,
    FsrsEngine,
    InMemoryItemStore,
    LearnableItem,
    SqlItemStore,
    SqlSettingsStore,
    get_engine,
    init_db,
)


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def classic():
    return ClassicEngine()


@pytest.fixture
def fsrs(rng):
    return FsrsEngine(rng=rng)


@pytest.fixture
def make_item(now):
    """Factory for items; next_due defaults to now (due, not overdue)."""
    counter = iter(range(1, 10_000))

    def _make(item_id=None, **fields):
        fields.setdefault("next_due", now)
        return LearnableItem(id=item_id or f"item-{next(counter)}", **fields)

    return _make


@pytest.fixture
def memory_store():
    return InMemoryItemStore()


@pytest.fixture
def clock(now):
    """Mutable clock: advance with clock.advance(days=...)."""

    class _Clock:
        def __init__(self, current):
            self.current = current

        def __call__(self):
            return self.current

        def advance(self, **delta):
            self.current = self.current + timedelta(**delta)

    return _Clock(now)


@pytest.fixture
def sql_engine():
    engine = get_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine):
    return SqlItemStore(sql_engine)


@pytest.fixture
def settings_store(sql_engine):
    return SqlSettingsStore(sql_engine)
