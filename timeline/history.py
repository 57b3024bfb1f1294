"""
History snapshot: the serializable (initial_state, events, pointer) triple.

Together the three fields are enough to rebuild an identical store, so this is
the unit a persistence collaborator saves and loads.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .core.canonical import canonical_json_str
from .core.errors import InvalidHistoryState
from .core.events import Event


@dataclass(frozen=True)
class HistorySnapshot:
    """
    Immutable history record.

    Fields:
        initial_state: Baseline snapshot
        events: Event log in chronological order
        pointer: Index of the last applied event (-1 = none)
    """
    initial_state: Any
    events: Tuple[Event, ...] = field(default_factory=tuple)
    pointer: int = -1

    def __post_init__(self) -> None:
        if not isinstance(self.events, tuple):
            object.__setattr__(self, "events", tuple(self.events))
        if isinstance(self.pointer, bool) or not isinstance(self.pointer, int):
            raise InvalidHistoryState(f"pointer must be an int, got {self.pointer!r}")
        if not -1 <= self.pointer <= len(self.events) - 1:
            raise InvalidHistoryState(
                f"pointer {self.pointer} outside [-1, {len(self.events) - 1}]"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_state": self.initial_state,
            "events": [e.to_dict() for e in self.events],
            "pointer": self.pointer,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "HistorySnapshot":
        """
        Rebuild a history from its serialized form.

        A missing pointer defaults to the last event, like store construction.

        Raises:
            InvalidHistoryState: If required fields are missing or malformed
        """
        if not isinstance(data, dict) or "initial_state" not in data:
            raise InvalidHistoryState("history must be an object with an initial_state")
        raw_events = data.get("events", [])
        if not isinstance(raw_events, list):
            raise InvalidHistoryState("history events must be a list")
        events = tuple(Event.from_dict(e) for e in raw_events)
        pointer = data.get("pointer")
        if pointer is None:
            pointer = len(events) - 1
        return HistorySnapshot(
            initial_state=data["initial_state"],
            events=events,
            pointer=pointer,
        )

    def to_json(self) -> str:
        """Canonical JSON (sorted keys, no whitespace)."""
        return canonical_json_str(self.to_dict())

    @staticmethod
    def from_json(text: str) -> "HistorySnapshot":
        try:
            data = json.loads(text)
        except ValueError as ex:
            raise InvalidHistoryState(f"history is not valid JSON: {ex}") from ex
        return HistorySnapshot.from_dict(data)
