"""
Exception types for the event-sourced store.
"""

from typing import Any, Optional, Tuple


class TimelineError(Exception):
    """Base class for all store errors."""
    pass


class UnknownMutation(TimelineError, LookupError):
    """Raised when a mutation name is not present in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown mutation: {name!r}")
        self.name = name


class InvalidIndex(TimelineError, IndexError):
    """Raised when a replay, undo or redo target is outside the event log."""

    def __init__(self, index: Any, size: int, reason: Optional[str] = None) -> None:
        msg = reason or f"index {index!r} outside [-1, {size - 1}]"
        super().__init__(msg)
        self.index = index
        self.size = size


class MutationFactoryError(TimelineError):
    """Raised when a registered mutation rejects its arguments or fails while applying."""

    def __init__(self, name: str, args: Tuple[Any, ...], reason: str) -> None:
        super().__init__(f"Mutation {name!r} failed: {reason}")
        self.name = name
        self.mutation_args = args


class InvalidHistoryState(TimelineError):
    """Raised when an event log and pointer do not describe a valid history."""
    pass
