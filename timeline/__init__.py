"""
Timeline

In-memory event-sourced state container with linear undo, redo and time-travel.
"""

from .core import (
    Event,
    MutationRegistry,
    produce,
    TimelineError,
    UnknownMutation,
    InvalidIndex,
    MutationFactoryError,
    InvalidHistoryState,
)
from .config import StoreConfig
from .history import HistorySnapshot
from .store import EventSourcedStore, HistoryControls

__version__ = "0.1.0"

__all__ = [
    "Event",
    "MutationRegistry",
    "produce",
    "TimelineError",
    "UnknownMutation",
    "InvalidIndex",
    "MutationFactoryError",
    "InvalidHistoryState",
    "StoreConfig",
    "HistorySnapshot",
    "EventSourcedStore",
    "HistoryControls",
]
