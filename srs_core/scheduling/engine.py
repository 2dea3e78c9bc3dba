"""
Engine - Interface shared by the scheduling algorithms

Both engines are pure: they read an item, a review and a timestamp and
return a new SchedulerUpdate. They never read the system clock, never
mutate their inputs and never perform I/O.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from srs_core.scheduling.memory_state import LearnableItem, ReviewEvent, SchedulerUpdate


class EngineName(str, Enum):
    CLASSIC = "classic"
    FSRS = "fsrs"


def parse_engine_name(value: Optional[str]) -> EngineName:
    """
    Resolve a configured algorithm name.

    Anything other than "classic" or "fsrs" (after trimming and
    lower-casing), including None, resolves to classic.
    """
    if isinstance(value, str):
        normalized = value.strip().lower()
        for name in EngineName:
            if name.value == normalized:
                return name
    return EngineName.CLASSIC


class SchedulerEngine(ABC):
    """Capability interface: initialize, update, is_due, sort_by_priority."""

    name: EngineName

    @abstractmethod
    def initialize(self, now: datetime) -> SchedulerUpdate:
        """Scheduling state for an item that just became reviewable."""

    @abstractmethod
    def explain(
        self,
        item: LearnableItem,
        review: ReviewEvent,
        now: datetime
    ) -> tuple[SchedulerUpdate, dict[str, Any]]:
        """Compute the update plus a dict of every intermediate value."""

    @abstractmethod
    def priority(self, item: LearnableItem, now: datetime) -> float:
        """Review priority score; higher is reviewed first."""

    def update(self, item: LearnableItem, review: ReviewEvent, now: datetime) -> SchedulerUpdate:
        update, _ = self.explain(item, review, now)
        return update

    def is_due(self, item: LearnableItem, now: datetime) -> bool:
        return now >= item.next_due

    def priority_key(self, item: LearnableItem, now: datetime) -> tuple[int, float]:
        # Due items form the upper tier regardless of their score
        return (1 if self.is_due(item, now) else 0, self.priority(item, now))

    def sort_by_priority(self, items: Iterable[LearnableItem], now: datetime) -> list[LearnableItem]:
        """Highest priority first; equal keys keep their input order."""
        return sorted(items, key=lambda item: self.priority_key(item, now), reverse=True)
