"""
Event model for recorded mutations.

Events are immutable records of one mutation invocation: the registry name
and the positional arguments captured when the action was called.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .canonical import canonical_json_str
from .errors import InvalidHistoryState


@dataclass(frozen=True)
class Event:
    """
    Immutable event record.

    Fields:
        name: Mutation name (key in the MutationRegistry)
        args: Positional arguments passed to the mutation factory

    Arity and argument types are owned by the registry entry, not by the
    event, so events stay generic and serializable.
    """
    name: str
    args: Tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "args": list(self.args)}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Event":
        """
        Build an event from its serialized form.

        Raises:
            InvalidHistoryState: If the record is not {"name": str, "args": list}
        """
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise InvalidHistoryState(f"malformed event record: {data!r}")
        args = data.get("args", [])
        if not isinstance(args, (list, tuple)):
            raise InvalidHistoryState(f"event args must be a list: {data!r}")
        return Event(name=data["name"], args=tuple(deepcopy(args)))

    def label(self) -> str:
        """Human-readable form, e.g. updateName("Ann")."""
        if not self.args:
            return f"{self.name}()"
        return f"{self.name}({canonical_json_str(list(self.args))[1:-1]})"
