"""
Core primitives for the event-sourced store.

This module provides the building blocks the store is assembled from:
- Event: Immutable record of one mutation invocation
- MutationRegistry: Name -> mutation factory capability table
- Producer: Copy-on-write snapshot production from a draft mutator
- Canonical: Deterministic serialization
"""

from .events import Event
from .registry import MutationRegistry, MutationFactory, DraftMutator
from .producer import SnapshotProducer, produce
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .errors import (
    TimelineError,
    UnknownMutation,
    InvalidIndex,
    MutationFactoryError,
    InvalidHistoryState,
)

__all__ = [
    "Event",
    "MutationRegistry",
    "MutationFactory",
    "DraftMutator",
    "SnapshotProducer",
    "produce",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "TimelineError",
    "UnknownMutation",
    "InvalidIndex",
    "MutationFactoryError",
    "InvalidHistoryState",
]
