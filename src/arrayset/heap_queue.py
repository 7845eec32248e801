"""Binary min-heap implementing the PriorityQueue contract.

Keys are read at comparison time rather than cached at insertion, so an item
whose priority is mutated in place while at the front can be re-positioned
with ``changed()``. Ties are broken by insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import heapq
import itertools
import logging
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from arrayset.exceptions import NoSuchElementError
from arrayset.priority_queue import PriorityQueue

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _identity(item):
    return item


@dataclass(eq=False)
class _HeapEntry:
    """Queued item plus its insertion sequence number."""

    item: Any
    seq: int
    key: Callable[[Any], Any] = field(repr=False)

    def sort_index(self) -> Tuple[Any, int]:
        return (self.key(self.item), self.seq)

    def __lt__(self, other: "_HeapEntry") -> bool:
        return self.sort_index() < other.sort_index()


class HeapPriorityQueue(PriorityQueue[T]):
    """heapq-backed priority queue; smallest key is dequeued first."""

    def __init__(self, items: Optional[Iterable[T]] = None, *,
                 key: Optional[Callable[[T], Any]] = None) -> None:
        self._key = key or _identity
        self._counter = itertools.count()
        self._heap: List[_HeapEntry] = [
            _HeapEntry(item, next(self._counter), self._key)
            for item in (() if items is None else items)
        ]
        heapq.heapify(self._heap)

    def size(self) -> int:
        return len(self._heap)

    def enqueue(self, item: T) -> None:
        heapq.heappush(self._heap, _HeapEntry(item, next(self._counter), self._key))

    def dequeue(self) -> T:
        self._require_nonempty("dequeue")
        return heapq.heappop(self._heap).item

    def first(self) -> T:
        self._require_nonempty("first")
        return self._heap[0].item

    def last(self) -> T:
        self._require_nonempty("last")
        return max(self._heap, key=_HeapEntry.sort_index).item

    def changed(self) -> None:
        self._require_nonempty("changed")
        root = self._heap[0]
        heapq.heapreplace(self._heap, root)
        if self._heap[0] is not root:
            logger.debug(f"[HEAP QUEUE] Root sifted down after change: {root.item!r}")

    def clear(self) -> None:
        self._heap.clear()

    def _require_nonempty(self, operation: str) -> None:
        if not self._heap:
            raise NoSuchElementError(f"{operation}() on an empty {type(self).__name__}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self._heap)})"


__all__ = ["HeapPriorityQueue"]
