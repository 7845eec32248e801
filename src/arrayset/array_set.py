"""
Array-backed set
================
An unordered set of unique values stored in a dense array segment.

Design points:
    - Live elements occupy storage[0:size]; slots past size are stale
    - Membership, removal and insertion are linear scans over the live prefix
    - Removal moves the last live element into the vacated slot (no shifting)
    - Iteration is fail-fast: structural changes made through anything other
      than the iterator's own remove() are reported, never tolerated

Only worth it for small sets (tens of elements), where a scan over a
contiguous array beats hashing and the per-element overhead of a hash table.

Storage is a Python list, or a one-dimensional numpy array when a dtype is
given (typed storage for primitive-like elements).
"""

from __future__ import annotations

import copy
import logging
from collections import abc
from typing import AbstractSet, Any, Callable, Iterable, Iterator, List, Optional, TypeVar

import numpy as np

from arrayset.config import DEFAULT_ARRAY_SET_DEFAULTS, ArraySetDefaults
from arrayset.exceptions import (
    ConcurrentModificationError,
    DuplicateElementError,
    IllegalIteratorStateError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _allocate(capacity: int, dtype: Optional[np.dtype]):
    """Allocate backing storage with ``capacity`` slots."""
    if dtype is None:
        return [None] * capacity
    return np.empty(capacity, dtype=dtype)


def _snapshot_membership(collection: Iterable[Any]) -> Callable[[Any], bool]:
    """Membership test over ``collection`` that is safe against later mutation.

    Sets are queried directly; any other iterable is materialised first so a
    view or iterator over the set being modified cannot change underneath.
    """
    if isinstance(collection, abc.Set):
        return collection.__contains__
    snapshot = list(collection)
    return snapshot.__contains__


class ArraySet(AbstractSet[T]):
    """
    Unordered set backed by a growable array

    Attributes:
        _a: backing storage (list or numpy array), len(_a) is the capacity
        _size: number of live elements
        _mod_count: bumped on every structural change, read by iterators

    Equality is set equality against any collections.abc.Set; the hash only
    depends on the unordered content, so equal sets hash equally.
    """

    def __init__(self,
                 source: Optional[Iterable[T]] = None,
                 *,
                 capacity: Optional[int] = None,
                 dtype: Any = None,
                 defaults: Optional[ArraySetDefaults] = None):
        """
        Create an empty set, or one holding the distinct values of ``source``

        Duplicates in ``source`` collapse: the first occurrence wins and the
        first-seen order is kept.

        Args:
            source: iterable of initial values
            capacity: pre-sizing hint for the backing storage
            dtype: numpy dtype for typed storage (None means a plain list)
            defaults: growth policy override
        """
        self._defaults = defaults or DEFAULT_ARRAY_SET_DEFAULTS
        if capacity is None:
            capacity = self._defaults.initial_capacity
        elif capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")

        self._dtype = None if dtype is None else np.dtype(dtype)
        self._a = _allocate(capacity, self._dtype)
        self._size = 0
        self._mod_count = 0
        self._size_warned = False

        if source is None:
            return
        if isinstance(source, abc.Set) and self._dtype is None:
            # Already distinct, no need for the de-duplication scan.
            self._load(source.to_list() if isinstance(source, ArraySet) else list(source))
        else:
            for value in source:
                self.add(value)

    # ========== alternate constructors ==========

    @classmethod
    def with_capacity(cls, capacity: int, *, dtype: Any = None,
                      defaults: Optional[ArraySetDefaults] = None) -> "ArraySet[T]":
        """Empty set whose storage already holds ``capacity`` slots."""
        return cls(capacity=capacity, dtype=dtype, defaults=defaults)

    @classmethod
    def from_distinct(cls, elements: Iterable[T], size: Optional[int] = None, *,
                      dtype: Any = None,
                      defaults: Optional[ArraySetDefaults] = None) -> "ArraySet[T]":
        """
        Build a set from values the caller guarantees to be pairwise distinct

        No de-duplication pass is made. Passing duplicates breaks the set
        invariant; that is the caller's responsibility.

        Args:
            elements: distinct values (copied, the set owns its storage)
            size: take only the first ``size`` values
        """
        items = list(elements)
        if size is None:
            size = len(items)
        elif not 0 <= size <= len(items):
            raise ValueError(f"size {size} is outside [0, {len(items)}]")

        instance = cls(capacity=size, dtype=dtype, defaults=defaults)
        instance._load(items[:size])
        return instance

    @classmethod
    def of(cls, *values: T, dtype: Any = None,
           defaults: Optional[ArraySetDefaults] = None) -> "ArraySet[T]":
        """Build a set from ``values``, rejecting repeated values."""
        instance = cls(capacity=len(values), dtype=dtype, defaults=defaults)
        for value in values:
            if not instance.add(value):
                raise DuplicateElementError(f"Duplicate element: {value!r}")
        return instance

    # ========== queries ==========

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    @property
    def capacity(self) -> int:
        """Number of slots in the backing storage."""
        return len(self._a)

    @property
    def dtype(self) -> Optional[np.dtype]:
        return self._dtype

    def contains(self, value: Any) -> bool:
        return self._index_of(value) != -1

    def _index_of(self, value: Any) -> int:
        a = self._a
        for i in range(self._size):
            if a[i] is value or a[i] == value:
                return i
        return -1

    # ========== mutation ==========

    def add(self, value: T) -> bool:
        """
        Insert ``value`` unless already present

        Returns:
            bool: True if the set changed
        """
        value = self._coerce(value)
        if self._index_of(value) != -1:
            return False
        if self._size == len(self._a):
            self._grow(self._size + 1)
        self._a[self._size] = value
        self._size += 1
        self._mod_count += 1
        self._check_size()
        return True

    def remove(self, value: Any) -> bool:
        """
        Remove ``value`` if present

        The last live element takes the vacated slot, so the relative order
        of the remaining elements is not preserved.

        Returns:
            bool: True if the set changed (absent values are not an error)
        """
        index = self._index_of(value)
        if index == -1:
            return False
        self._remove_at(index)
        return True

    def remove_all(self, collection: Iterable[Any]) -> bool:
        """Remove every element that is also in ``collection``."""
        if collection is self:
            if self._size == 0:
                return False
            self.clear()
            return True
        return self.remove_if(_snapshot_membership(collection))

    def retain_all(self, collection: Iterable[Any]) -> bool:
        """Remove every element that is not in ``collection``."""
        if collection is self:
            return False
        member = _snapshot_membership(collection)
        return self.remove_if(lambda value: not member(value))

    def remove_if(self, predicate: Callable[[T], bool]) -> bool:
        """
        Remove every element for which ``predicate`` is true

        Each live element is tested exactly once. A removal relocates the last
        element into the current slot, so the same index is examined again
        instead of advancing.

        Returns:
            bool: True if at least one element was removed
        """
        modified = False
        expected = self._mod_count
        i = 0
        while i < self._size:
            doomed = predicate(self._a[i])
            self._check_for_comodification(expected)
            if doomed:
                self._remove_at(i)
                expected = self._mod_count
                modified = True
            else:
                i += 1
        return modified

    def clear(self):
        """Drop all elements, keeping the allocated storage."""
        if self._size == 0:
            return
        if self._dtype is None:
            self._a[:self._size] = [None] * self._size
        self._size = 0
        self._mod_count += 1

    def _remove_at(self, index: int):
        last = self._size - 1
        if index != last:
            self._a[index] = self._a[last]
        if self._dtype is None:
            self._a[last] = None
        self._size = last
        self._mod_count += 1

    def _load(self, items: List[T]):
        """Fill an empty set with ``items``, assumed pairwise distinct."""
        n = len(items)
        if n > len(self._a):
            self._a = _allocate(n, self._dtype)
        self._a[:n] = items
        self._size = n
        self._mod_count += 1
        self._check_size()

    def _coerce(self, value: Any) -> Any:
        if self._dtype is None:
            return value
        try:
            stored = self._dtype.type(value)
        except OverflowError as exc:
            raise ValueError(f"{value!r} cannot be stored exactly as {self._dtype}") from exc
        # Also rejects NaN, which typed storage could never find again.
        if stored != value:
            raise ValueError(f"{value!r} cannot be stored exactly as {self._dtype}")
        return stored

    def _grow(self, required: int):
        old = self._a
        capacity = self._defaults.next_capacity(len(old), required)
        logger.debug(f"[ARRAY SET] Growing storage: {len(old)} -> {capacity} slots")
        grown = _allocate(capacity, self._dtype)
        grown[:self._size] = old[:self._size]
        self._a = grown

    def _check_size(self):
        threshold = self._defaults.large_set_warning_size
        if not self._size_warned and self._size > threshold:
            self._size_warned = True
            logger.warning(
                f"[ARRAY SET] Size {self._size} exceeds {threshold}; "
                f"linear scans get expensive, consider a hash-based set"
            )

    def _check_for_comodification(self, expected: int):
        if self._mod_count != expected:
            raise ConcurrentModificationError(
                f"ArraySet modified during traversal (expected version {expected}, "
                f"found {self._mod_count})"
            )

    # ========== traversal ==========

    def for_each(self, action: Callable[[T], Any]):
        """Call ``action`` once per element, in storage order."""
        expected = self._mod_count
        for i in range(self._size):
            action(self._a[i])
            self._check_for_comodification(expected)

    def iterator(self) -> "ArraySetIterator[T]":
        return ArraySetIterator(self)

    def __iter__(self) -> "ArraySetIterator[T]":
        return ArraySetIterator(self)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, value: Any) -> bool:
        return self._index_of(value) != -1

    # ========== snapshots and copies ==========

    def to_list(self) -> List[T]:
        """Live elements in storage order, as plain Python values."""
        if self._dtype is None:
            return self._a[:self._size]
        return self._a[:self._size].tolist()

    def to_numpy(self, dtype: Any = None) -> np.ndarray:
        """Live elements in storage order, as a one-dimensional numpy array."""
        if self._dtype is not None and dtype is None:
            return self._a[:self._size].copy()
        return np.array(self.to_list(), dtype=dtype)

    def clone(self) -> "ArraySet[T]":
        """Independent copy: same live elements, duplicated storage."""
        twin = type(self).__new__(type(self))
        twin._defaults = self._defaults
        twin._dtype = self._dtype
        twin._a = self._a.copy()
        twin._size = self._size
        twin._mod_count = 0
        twin._size_warned = self._size_warned
        return twin

    def __copy__(self) -> "ArraySet[T]":
        return self.clone()

    def __deepcopy__(self, memo) -> "ArraySet[T]":
        return type(self).from_distinct(
            copy.deepcopy(self.to_list(), memo),
            dtype=self._dtype,
            defaults=self._defaults,
        )

    def __reduce__(self):
        return (_restore, (type(self), self.to_list(), self._dtype, self._defaults))

    # ========== equality ==========

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, abc.Set):
            return NotImplemented
        if len(other) != self._size:
            return False
        a = self._a
        return all(a[i] in other for i in range(self._size))

    def __hash__(self) -> int:
        return hash(frozenset(self.to_list()))

    def __str__(self) -> str:
        return "{" + ", ".join(repr(value) for value in self.to_list()) + "}"

    def __repr__(self) -> str:
        if self._dtype is None:
            return f"{type(self).__name__}({self.to_list()!r})"
        return f"{type(self).__name__}({self.to_list()!r}, dtype={self._dtype.name!r})"


def _restore(cls, elements, dtype, defaults):
    """Unpickle helper: rebuild from a structural snapshot."""
    return cls.from_distinct(elements, dtype=dtype, defaults=defaults)


class ArraySetIterator(Iterator[T]):
    """
    Fail-fast cursor over an ArraySet

    remove() deletes the element last returned by next(); the element moved
    into the vacated slot is returned by the following next(). Any other
    structural change to the set raises ConcurrentModificationError on the
    next call to next() or remove().
    """

    def __init__(self, owner: ArraySet[T]):
        self._owner = owner
        self._next = 0
        self._last = -1
        self._expected_mod_count = owner._mod_count

    def has_next(self) -> bool:
        return self._next < self._owner._size

    def __next__(self) -> T:
        owner = self._owner
        owner._check_for_comodification(self._expected_mod_count)
        if self._next >= owner._size:
            raise StopIteration
        self._last = self._next
        self._next += 1
        return owner._a[self._last]

    next = __next__

    def remove(self):
        if self._last < 0:
            raise IllegalIteratorStateError("remove() must follow a successful next()")
        owner = self._owner
        owner._check_for_comodification(self._expected_mod_count)
        owner._remove_at(self._last)
        # Revisit the slot: it now holds the former last element.
        self._next = self._last
        self._last = -1
        self._expected_mod_count = owner._mod_count


__all__ = [
    "ArraySet",
    "ArraySetIterator",
]
