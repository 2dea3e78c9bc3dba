"""
Ratings - Recall rating validation and mapping

Converts caller input (raw ordinals, quiz telemetry, easy/hard marks)
into RecallRating values. This is the boundary where the closed rating
vocabulary is enforced.
"""

from __future__ import annotations

from typing import Optional

from srs_core.scheduling.constants import RecallRating
from srs_core.scheduling.exceptions import InvalidRatingError


# Response-latency thresholds for correct answers (milliseconds)
EASY_RESPONSE_MS = 3000
GOOD_RESPONSE_MS = 8000

DIFFICULTY_TAG_RATINGS = {
    "hard": RecallRating.HARD,
    "medium": RecallRating.GOOD,
    "easy": RecallRating.EASY,
}

MARK_RATINGS = {
    "easy": RecallRating.EASY,
    "hard": RecallRating.HARD,
}


def coerce_rating(value) -> RecallRating:
    """
    Validate a rating and return it as a RecallRating.

    Args:
        value: RecallRating or int ordinal in 0..3

    Returns:
        The matching RecallRating

    Raises:
        InvalidRatingError: For bools, non-integers and out-of-range values
    """
    if isinstance(value, RecallRating):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRatingError(f"Rating must be an int in 0..3, got {value!r}")
    try:
        return RecallRating(value)
    except ValueError:
        raise InvalidRatingError(f"Rating must be in 0..3, got {value}") from None


def rating_from_quiz(
    correct: bool,
    response_time_ms: Optional[float] = None,
    difficulty: Optional[str] = None
) -> RecallRating:
    """
    Map quiz telemetry to a recall rating.

    Priority of signals for a correct answer:
    1. Explicit difficulty tag (hard/medium/easy)
    2. Response latency (<3s easy, <8s good, otherwise hard)
    3. Default to GOOD

    Args:
        correct: Whether the answer was correct
        response_time_ms: Time taken to answer, if measured
        difficulty: Optional explicit difficulty tag

    Returns:
        RecallRating for the attempt
    """
    if not correct:
        return RecallRating.FAIL

    if difficulty:
        try:
            return DIFFICULTY_TAG_RATINGS[difficulty]
        except KeyError:
            raise InvalidRatingError(f"Unknown difficulty tag: {difficulty!r}") from None

    if response_time_ms is not None:
        if response_time_ms < EASY_RESPONSE_MS:
            return RecallRating.EASY
        if response_time_ms < GOOD_RESPONSE_MS:
            return RecallRating.GOOD
        return RecallRating.HARD

    return RecallRating.GOOD


def rating_for_mark(mark: str) -> RecallRating:
    """Map an 'easy'/'hard' mark made while learning to a rating."""
    try:
        return MARK_RATINGS[mark]
    except KeyError:
        raise InvalidRatingError(f"Mark must be 'easy' or 'hard', got {mark!r}") from None


def recommended_batch_size(due_count: int) -> int:
    """
    Recommended study batch size for a number of due items.

    Small backlogs are studied in full; larger ones are capped so a
    session stays manageable.
    """
    if due_count <= 10:
        return max(0, due_count)
    if due_count <= 25:
        return 15
    if due_count <= 50:
        return 20
    return 25
