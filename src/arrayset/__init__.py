"""Compact array-backed set and priority-queue contract."""

from arrayset.array_set import ArraySet, ArraySetIterator
from arrayset.config import DEFAULT_ARRAY_SET_DEFAULTS, ArraySetDefaults
from arrayset.exceptions import (
    ConcurrentModificationError,
    ContainerError,
    DuplicateElementError,
    IllegalIteratorStateError,
    NoSuchElementError,
    UnsupportedOperationError,
)
from arrayset.heap_queue import HeapPriorityQueue
from arrayset.priority_queue import PriorityQueue

__all__ = [
    "ArraySet",
    "ArraySetIterator",
    "ArraySetDefaults",
    "DEFAULT_ARRAY_SET_DEFAULTS",
    "ContainerError",
    "UnsupportedOperationError",
    "ConcurrentModificationError",
    "IllegalIteratorStateError",
    "NoSuchElementError",
    "DuplicateElementError",
    "PriorityQueue",
    "HeapPriorityQueue",
]
