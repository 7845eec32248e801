"""Error kinds raised by the containers.

All of them signal programming errors (contract violations), not transient
faults; none is meant to be retried.
"""


class ContainerError(Exception):
    """Base class for container contract violations."""


class UnsupportedOperationError(ContainerError, NotImplementedError):
    """The container does not implement the requested optional operation."""


class ConcurrentModificationError(ContainerError, RuntimeError):
    """The container was structurally modified while being traversed."""


class IllegalIteratorStateError(ContainerError, RuntimeError):
    """An iterator method was called in a state that does not allow it."""


class NoSuchElementError(ContainerError, LookupError):
    """An element was requested from an empty container."""


class DuplicateElementError(ContainerError, ValueError):
    """A checked construction received the same element twice."""
