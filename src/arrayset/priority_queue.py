"""Minimal contract shared by priority-queue-like containers.

Implementers only have to provide ``size``. Everything else either derives
from it (``is_empty``) or raises UnsupportedOperationError until a concrete
queue overrides it. Heap-based queues typically override ``changed`` to
re-sift the root after its priority was mutated in place.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from arrayset.exceptions import UnsupportedOperationError

T = TypeVar("T")


class PriorityQueue(ABC, Generic[T]):
    """Abstract priority queue with optional operations."""

    @abstractmethod
    def size(self) -> int:
        """Number of queued elements."""

    def is_empty(self) -> bool:
        return self.size() == 0

    def enqueue(self, item: T) -> None:
        raise self._unsupported("enqueue")

    def dequeue(self) -> T:
        raise self._unsupported("dequeue")

    def first(self) -> T:
        raise self._unsupported("first")

    def last(self) -> T:
        """Element that would be dequeued last, for bounded top-k style use."""
        raise self._unsupported("last")

    def changed(self) -> None:
        """Restore the ordering after the first element was mutated in place."""
        raise self._unsupported("changed")

    def clear(self) -> None:
        raise self._unsupported("clear")

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            f"{type(self).__name__} does not support {operation}()"
        )

    def __len__(self) -> int:
        return self.size()


__all__ = ["PriorityQueue"]
