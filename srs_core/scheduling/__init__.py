"""
Scheduling - Spaced repetition for learnable items

Two interchangeable algorithms behind one interface:
- classic: SM-2 style ease factor / interval growth
- fsrs: simplified difficulty/stability model with retrievability decay

Quick start:
    from srs_core import scheduling

    store = scheduling.InMemoryItemStore()
    service = scheduling.SchedulerService(store, scheduling.EnvConfigStore())

    # Apply a review
    service.process_review("word-1", scheduling.ReviewEvent(scheduling.RecallRating.GOOD))

    # Next study batch
    batch = service.get_due_batch()
"""

# Ratings
from srs_core.scheduling.constants import (
    RecallRating,
    ClassicParameters,
    FsrsParameters,
    FSRS_VERSION,
)
from srs_core.scheduling.ratings import (
    coerce_rating,
    rating_from_quiz,
    rating_for_mark,
    recommended_batch_size,
)

# Memory state
from srs_core.scheduling.memory_state import (
    LearnableItem,
    ReviewEvent,
    SchedulerUpdate,
    Fresh,
    Reviewed,
    review_history,
    apply_update,
    calculate_retrievability,
    utc_now,
)

# Engines
from srs_core.scheduling.engine import EngineName, SchedulerEngine, parse_engine_name
from srs_core.scheduling.classic_engine import ClassicEngine
from srs_core.scheduling.fsrs_engine import FsrsEngine

# Service and collaborators
from srs_core.scheduling.service import SchedulerService, QuizResult, BatchOutcome
from srs_core.scheduling.stores import ItemStore, ConfigStore, InMemoryItemStore
from srs_core.scheduling.config import EnvConfigStore, StaticConfigStore

# Database API
from srs_core.scheduling.database import (
    get_engine,
    init_db,
    reset_db,
    SqlItemStore,
    SqlSettingsStore,
)

# Errors
from srs_core.scheduling.exceptions import (
    SchedulingError,
    ItemNotFoundError,
    InvalidRatingError,
    ConfigReadError,
)


__all__ = [
    # Ratings
    "RecallRating",
    "coerce_rating",
    "rating_from_quiz",
    "rating_for_mark",
    "recommended_batch_size",

    # Parameters
    "ClassicParameters",
    "FsrsParameters",
    "FSRS_VERSION",

    # Memory state
    "LearnableItem",
    "ReviewEvent",
    "SchedulerUpdate",
    "Fresh",
    "Reviewed",
    "review_history",
    "apply_update",
    "calculate_retrievability",
    "utc_now",

    # Engines
    "EngineName",
    "SchedulerEngine",
    "parse_engine_name",
    "ClassicEngine",
    "FsrsEngine",

    # Service
    "SchedulerService",
    "QuizResult",
    "BatchOutcome",
    "ItemStore",
    "ConfigStore",
    "InMemoryItemStore",
    "EnvConfigStore",
    "StaticConfigStore",

    # Database operations
    "get_engine",
    "init_db",
    "reset_db",
    "SqlItemStore",
    "SqlSettingsStore",

    # Errors
    "SchedulingError",
    "ItemNotFoundError",
    "InvalidRatingError",
    "ConfigReadError",
]
