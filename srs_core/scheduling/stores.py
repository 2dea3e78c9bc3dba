"""
Stores - Collaborator interfaces consumed by the scheduler service

The service only ever talks to these protocols. SQL-backed
implementations live in the database module; InMemoryItemStore is a
dict-backed implementation for embedding and tests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Protocol

from srs_core.scheduling.exceptions import ItemNotFoundError
from srs_core.scheduling.memory_state import LearnableItem, SchedulerUpdate, apply_update


Clock = Callable[[], datetime]


class ItemStore(Protocol):
    def get(self, item_id: str) -> Optional[LearnableItem]:
        ...

    def update(self, item_id: str, update: SchedulerUpdate) -> None:
        ...

    def query_due(
        self,
        now: datetime,
        scope: Optional[str] = None,
        limit: Optional[int] = None
    ) -> list[LearnableItem]:
        ...

    def count_due(self, now: datetime, scope: Optional[str] = None) -> int:
        ...

    def query_all(self, scope: Optional[str] = None) -> list[LearnableItem]:
        ...


class ConfigStore(Protocol):
    def get_algorithm_preference(self) -> Optional[str]:
        ...


class InMemoryItemStore:
    """Item store backed by a dict, preserving insertion order."""

    def __init__(self, items: Optional[list[LearnableItem]] = None):
        self._items: dict[str, LearnableItem] = {}
        for item in items or []:
            self.add(item)

    def add(self, item: LearnableItem) -> None:
        self._items[item.id] = item

    def get(self, item_id: str) -> Optional[LearnableItem]:
        return self._items.get(item_id)

    def update(self, item_id: str, update: SchedulerUpdate) -> None:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        self._items[item_id] = apply_update(item, update)

    def _in_scope(self, scope: Optional[str]) -> list[LearnableItem]:
        return [item for item in self._items.values() if scope is None or item.scope == scope]

    def query_due(
        self,
        now: datetime,
        scope: Optional[str] = None,
        limit: Optional[int] = None
    ) -> list[LearnableItem]:
        due = [item for item in self._in_scope(scope) if item.next_due <= now]
        due.sort(key=lambda item: (item.next_due, item.id))
        return due if limit is None else due[:limit]

    def count_due(self, now: datetime, scope: Optional[str] = None) -> int:
        return sum(1 for item in self._in_scope(scope) if item.next_due <= now)

    def query_all(self, scope: Optional[str] = None) -> list[LearnableItem]:
        return self._in_scope(scope)
