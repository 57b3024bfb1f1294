"""
Replay runner: reconstruct state from the event log.

Replay is pure: applies each event's draft mutator in log order, starting
from the initial snapshot or from a cached checkpoint.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

from ..core.errors import MutationFactoryError, TimelineError
from ..core.events import Event
from ..core.producer import SnapshotProducer, produce
from ..core.registry import MutationRegistry

# Called after each applied event with (index, state)
StepHook = Callable[[int, Any], None]


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        state: State after applying events[0..pointer]
        pointer: Index of the last applied event (-1 = none)
        applied: Number of events applied during this replay
    """
    state: Any
    pointer: int
    applied: int


def apply_event(
    state: Any,
    event: Event,
    registry: MutationRegistry,
    producer: SnapshotProducer = produce,
) -> Any:
    """
    Apply one event to state and return the new snapshot.

    Raises:
        UnknownMutation: If event.name is not registered
        MutationFactoryError: If the factory or its draft mutator fails
    """
    mutator = registry.mutator(event.name, event.args)
    try:
        return producer(state, mutator)
    except TimelineError:
        raise
    except Exception as ex:
        raise MutationFactoryError(event.name, event.args, str(ex) or type(ex).__name__) from ex


def replay(
    initial_state: Any,
    events: Sequence[Event],
    registry: MutationRegistry,
    to_index: Optional[int] = None,
    producer: SnapshotProducer = produce,
    start: Optional[Tuple[int, Any]] = None,
    on_step: Optional[StepHook] = None,
) -> ReplayResult:
    """
    Replay events to reconstruct state.

    Args:
        initial_state: Baseline snapshot (never mutated)
        events: Event log
        registry: Mutation registry used to interpret events
        to_index: Stop at this index (inclusive, None = whole log).
            Values past the end of the log stop at the last event.
        producer: Snapshot producer
        start: Optional (index, state) checkpoint to resume from; the state
            must equal the fold up to and including index
        on_step: Optional hook called after each applied event

    Returns:
        ReplayResult with final state and pointer
    """
    last = len(events) - 1
    target = last if to_index is None else min(to_index, last)

    pointer, st = -1, initial_state
    if start is not None and start[0] <= target:
        pointer, st = start

    count = 0
    for i in range(pointer + 1, target + 1):
        st = apply_event(st, events[i], registry, producer)
        pointer = i
        count += 1
        if on_step is not None:
            on_step(i, st)

    return ReplayResult(state=st, pointer=pointer, applied=count)
