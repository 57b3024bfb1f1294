"""
Checkpoint cache: intermediate replay states kept in memory.

A checkpoint at index i holds the state after applying events[0..i]. Replay
to any k >= i may start from it instead of the initial snapshot. Checkpoints
are a pure optimization: results must match a full replay exactly.
"""

from bisect import bisect_right, insort
from copy import deepcopy
from typing import Any, Dict, List, Optional, Tuple


class CheckpointCache:
    """
    Sparse map of event index -> state.

    A checkpoint is recorded after every `interval`-th event
    (indices interval-1, 2*interval-1, ...). interval 0 disables the cache.
    """

    def __init__(self, interval: int = 0) -> None:
        if interval < 0:
            raise ValueError(f"checkpoint interval must be >= 0, got {interval}")
        self.interval = interval
        self._states: Dict[int, Any] = {}
        self._indices: List[int] = []

    @property
    def enabled(self) -> bool:
        return self.interval > 0

    def __len__(self) -> int:
        return len(self._indices)

    def indices(self) -> Tuple[int, ...]:
        return tuple(self._indices)

    def wants(self, index: int) -> bool:
        return self.enabled and (index + 1) % self.interval == 0

    def record(self, index: int, state: Any) -> None:
        """Store a copy of state for index if it falls on the checkpoint grid."""
        if not self.wants(index) or index in self._states:
            return
        self._states[index] = deepcopy(state)
        insort(self._indices, index)

    def nearest(self, index: int) -> Optional[Tuple[int, Any]]:
        """Return the highest checkpoint at or below index, or None."""
        pos = bisect_right(self._indices, index)
        if pos == 0:
            return None
        found = self._indices[pos - 1]
        return found, self._states[found]

    def truncate(self, last_kept: int) -> None:
        """Drop checkpoints for events past last_kept (branch-cut)."""
        pos = bisect_right(self._indices, last_kept)
        for dropped in self._indices[pos:]:
            del self._states[dropped]
        del self._indices[pos:]

    def copy(self) -> "CheckpointCache":
        # States are never mutated once recorded, so sharing them is safe.
        other = CheckpointCache(self.interval)
        other._states = dict(self._states)
        other._indices = list(self._indices)
        return other
