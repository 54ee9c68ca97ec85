"""Comparator-driven priority queue used as the search frontier."""

from __future__ import annotations

import heapq
import itertools
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Callable

T = TypeVar("T")


class _Entry(Generic[T]):
    """Heap slot pairing an item with its insertion sequence number."""

    __slots__ = ("compare", "item", "sequence")

    def __init__(self, item: T, sequence: int, compare: Callable[[T, T], float]) -> None:
        self.item = item
        self.sequence = sequence
        self.compare = compare

    def __lt__(self, other: _Entry[T]) -> bool:
        order = self.compare(self.item, other.item)
        if order != 0:
            return order < 0
        return self.sequence < other.sequence


class OrderingQueue(Generic[T]):
    """Priority queue that always yields its minimum item under ``compare``.

    ``compare(a, b)`` returns a negative number when ``a`` should leave first,
    a positive number when ``b`` should, and zero for ties. Tied items leave in
    insertion order. Items are never deduplicated.
    """

    def __init__(self, compare: Callable[[T, T], float]) -> None:
        """Create an empty queue ordered by ``compare``."""
        self._compare = compare
        self._heap: list[_Entry[T]] = []
        self._counter = itertools.count()

    def insert(self, item: T) -> None:
        """Add ``item`` to the queue."""
        heapq.heappush(self._heap, _Entry(item, next(self._counter), self._compare))

    def remove_min(self) -> T | None:
        """Remove and return the first-ranked item, or ``None`` when empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap).item

    def is_empty(self) -> bool:
        """Return ``True`` when the queue holds no items."""
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)


__all__ = ["OrderingQueue"]
