"""
Replay system for deterministic state reconstruction.

Replay folds the snapshot producer over a prefix of the event log.
Must be 100% deterministic: same events -> same state.
"""

from .runner import ReplayResult, apply_event, replay

__all__ = [
    "ReplayResult",
    "apply_event",
    "replay",
]
