"""Tunable defaults for the array-backed containers.

Growth policy and diagnostic thresholds are collected here so callers can
adjust them from a single location without touching container code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ArraySetDefaults:
    """Storage growth policy for ArraySet.

    An empty set allocates nothing until the first insertion, then grows to
    ``min_grow_capacity`` and multiplies by ``growth_factor`` afterwards.
    """

    initial_capacity: int = 0
    min_grow_capacity: int = 2
    growth_factor: int = 2
    # Linear scans stop paying off past a few dozen elements.
    large_set_warning_size: int = 64

    def __post_init__(self):
        if self.initial_capacity < 0:
            raise ValueError(f"initial_capacity must be >= 0, got {self.initial_capacity}")
        if self.min_grow_capacity < 1:
            raise ValueError(f"min_grow_capacity must be >= 1, got {self.min_grow_capacity}")
        if self.growth_factor < 2:
            raise ValueError(f"growth_factor must be >= 2, got {self.growth_factor}")

    def next_capacity(self, current: int, required: int) -> int:
        """Return the capacity to grow to so that ``required`` slots fit."""
        capacity = max(current * self.growth_factor, self.min_grow_capacity)
        return max(capacity, required)


DEFAULT_ARRAY_SET_DEFAULTS = ArraySetDefaults()
