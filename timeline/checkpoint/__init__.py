"""
In-memory checkpoints for faster replay, and state hashing helpers.
"""

from .cache import CheckpointCache
from .snapshot import serialize_state, compute_state_hash

__all__ = [
    "CheckpointCache",
    "serialize_state",
    "compute_state_hash",
]
