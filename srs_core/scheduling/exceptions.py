"""Exceptions raised by the scheduling package."""

from __future__ import annotations


class SchedulingError(Exception):
    """Base exception for the scheduling package."""


class ItemNotFoundError(SchedulingError, LookupError):
    """Raised when an item id does not resolve in the item store."""

    def __init__(self, item_id: str):
        super().__init__(f"Item {item_id!r} not found")
        self.item_id = item_id


class InvalidRatingError(SchedulingError, ValueError):
    """Raised when a rating outside FAIL/HARD/GOOD/EASY reaches the scheduler."""


class ConfigReadError(SchedulingError):
    """Reading the algorithm preference failed; callers fall back to classic."""
