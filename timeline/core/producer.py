"""
Snapshot production from draft mutators.

The producer turns (state, draft mutator) into a new snapshot without touching
the input: clone on entry, let the mutator write to the clone during its one
synchronous call, hand the clone back as the new snapshot.
"""

from copy import deepcopy
from typing import Any, Callable

from .registry import DraftMutator

# Producer signature: (state, draft_mutator) -> new_state
SnapshotProducer = Callable[[Any, DraftMutator], Any]


def produce(state: Any, mutator: DraftMutator) -> Any:
    """
    Apply a draft mutator to a deep copy of state.

    Neither the input state nor the returned snapshot is the draft object
    itself, so a mutator that keeps a reference to its draft cannot reach
    any snapshot the store records.

    Args:
        state: Current snapshot (left untouched)
        mutator: Callable that mutates its argument in place

    Returns:
        A copy of the mutated draft

    Raises:
        TypeError: If the mutator returns a value instead of mutating in place
    """
    draft = deepcopy(state)
    result = mutator(draft)
    if result is not None:
        raise TypeError(
            f"draft mutator returned {type(result).__name__}; mutate the draft in place instead"
        )
    return deepcopy(draft)
