"""
Event-sourced store with linear undo, redo and time-travel.

The store owns an initial snapshot, a mutation registry, an append-only event
log and a pointer into that log. The current state is always the fold of the
snapshot producer over events[0..pointer], starting from the initial snapshot:

    store = EventSourcedStore({"name": "", "age": 18}, {"updateName": update_name})
    store.actions.updateName("Ann")
    store.undo()
    store.redo()
    store.replay(-1)

Applying a mutation while the pointer is behind the tip discards every event
after the pointer (branch-cut). Undo, redo and replay only move the pointer.
"""

import uuid
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .checkpoint import CheckpointCache, compute_state_hash
from .config import REPLAY_CLAMP, StoreConfig
from .core.errors import InvalidHistoryState, InvalidIndex, TimelineError, UnknownMutation
from .core.events import Event
from .core.producer import SnapshotProducer, produce
from .core.registry import MutationFactory, MutationRegistry
from .history import HistorySnapshot
from .logging_config import get_logger
from .replay import ReplayResult, apply_event, replay

Listener = Callable[["EventSourcedStore"], None]


@dataclass(frozen=True)
class HistoryControls:
    """
    History controls as a UI binds to them.

    undo and redo are None when unavailable, so a consumer can disable the
    matching control instead of catching InvalidIndex.
    """
    undo: Optional[Callable[[], None]]
    redo: Optional[Callable[[], None]]
    replay: Callable[[int], None]
    pointer: int
    events: Tuple[Event, ...] = field(default_factory=tuple)


class Actions:
    """
    One callable per registered mutation, bound to a store.

    store.actions.updateName("Ann") is store.dispatch("updateName", "Ann").
    Names that are not valid identifiers are reachable as store.actions["my-name"].
    """

    def __init__(self, store: "EventSourcedStore") -> None:
        self._store = store

    def __getitem__(self, name: str) -> Callable[..., None]:
        return self._store.action(name)

    def __getattr__(self, name: str) -> Callable[..., None]:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._store.action(name)

    def __contains__(self, name: object) -> bool:
        return name in self._store.registry

    def __iter__(self) -> Iterator[str]:
        return iter(self._store.mutation_names)

    def __len__(self) -> int:
        return len(self._store.registry)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._store.mutation_names))


class EventSourcedStore:
    """
    In-memory event-sourced state container.

    Invariant: at every observable instant
        state == fold(apply, initial_state, events[0..pointer])

    Every operation computes its result into locals first and publishes state,
    log and pointer together, so a failing operation leaves the store as it was.
    """

    def __init__(
        self,
        initial_state: Any,
        mutations: Mapping[str, MutationFactory],
        events: Optional[Sequence[Union[Event, dict]]] = None,
        pointer: Optional[int] = None,
        producer: Optional[SnapshotProducer] = None,
        config: Optional[StoreConfig] = None,
    ) -> None:
        """
        Build a store and replay any supplied history.

        Args:
            initial_state: Baseline snapshot (deep-copied on entry)
            mutations: Mapping of name -> mutation factory, or a MutationRegistry
            events: Existing event log to resume from (Event or serialized dicts)
            pointer: Index of the last applied event; defaults to the tip
            producer: Snapshot producer; defaults to deep-copy produce()
            config: Store configuration; defaults to StoreConfig.from_env()

        Raises:
            InvalidHistoryState: If pointer is outside [-1, len(events) - 1]
                or the log cannot be replayed with this registry
        """
        self.store_id = f"store-{uuid.uuid4().hex[:12]}"
        self._log = get_logger(__name__, trace_id=self.store_id)

        self._registry = MutationRegistry.coerce(mutations)
        self._producer: SnapshotProducer = producer or produce
        self._config = config or StoreConfig.from_env()
        self._initial = deepcopy(initial_state)
        self._checkpoints = CheckpointCache(self._config.checkpoint_interval)
        self._listeners: List[Listener] = []

        recorded = tuple(e if isinstance(e, Event) else Event.from_dict(e) for e in (events or ()))
        if self._config.copy_args:
            recorded = deepcopy(recorded)
        if pointer is None:
            pointer = len(recorded) - 1
        if isinstance(pointer, bool) or not isinstance(pointer, int):
            raise InvalidHistoryState(f"pointer must be an int, got {pointer!r}")
        if not -1 <= pointer <= len(recorded) - 1:
            raise InvalidHistoryState(f"pointer {pointer} outside [-1, {len(recorded) - 1}]")

        self._events: Tuple[Event, ...] = recorded
        self._pointer = -1
        self._state = self._initial
        try:
            result = self._fold(pointer)
        except TimelineError as ex:
            raise InvalidHistoryState(f"history cannot be replayed: {ex}") from ex
        self._state, self._pointer = result.state, result.pointer

        self.actions = Actions(self)
        self._log.debug(
            "Store created",
            extra={"events": len(self._events), "pointer": self._pointer},
        )

    @classmethod
    def from_history(
        cls,
        history: HistorySnapshot,
        mutations: Mapping[str, MutationFactory],
        producer: Optional[SnapshotProducer] = None,
        config: Optional[StoreConfig] = None,
    ) -> "EventSourcedStore":
        """Rebuild a store from a serialized (initial_state, events, pointer) triple."""
        return cls(
            history.initial_state,
            mutations,
            events=history.events,
            pointer=history.pointer,
            producer=producer,
            config=config,
        )

    def with_registry(self, mutations: Mapping[str, MutationFactory]) -> "EventSourcedStore":
        """
        New store over the same history, interpreted with a different registry.

        Raises:
            InvalidHistoryState: If the history cannot be replayed with it
        """
        return EventSourcedStore(
            self._initial,
            mutations,
            events=self._events,
            pointer=self._pointer,
            producer=self._producer,
            config=self._config,
        )

    # Queries

    @property
    def state(self) -> Any:
        """Deep copy of the current state; safe to mutate."""
        return deepcopy(self._state)

    def peek(self) -> Any:
        """Current state by reference (read-only contract)."""
        return self._state

    @property
    def initial_state(self) -> Any:
        return deepcopy(self._initial)

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def pointer(self) -> int:
        return self._pointer

    @property
    def registry(self) -> MutationRegistry:
        return self._registry

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def mutation_names(self) -> Tuple[str, ...]:
        return self._registry.names()

    @property
    def can_undo(self) -> bool:
        return self._pointer >= 0

    @property
    def can_redo(self) -> bool:
        return self._pointer < len(self._events) - 1

    def state_hash(self) -> str:
        """SHA-256 of the canonical JSON of the current state."""
        return compute_state_hash(self._state)

    def history(self) -> HistorySnapshot:
        return HistorySnapshot(
            initial_state=deepcopy(self._initial),
            events=self._events,
            pointer=self._pointer,
        )

    def controls(self) -> HistoryControls:
        return HistoryControls(
            undo=self.undo if self.can_undo else None,
            redo=self.redo if self.can_redo else None,
            replay=self.replay,
            pointer=self._pointer,
            events=self._events,
        )

    # Commands

    def action(self, name: str) -> Callable[..., None]:
        """
        Callable that dispatches the named mutation.

        Raises:
            UnknownMutation: If name is not registered
        """
        if name not in self._registry:
            raise UnknownMutation(name)

        def invoke(*args: Any) -> None:
            self.dispatch(name, *args)

        invoke.__name__ = name
        invoke.__qualname__ = f"{type(self).__name__}.actions.{name}"
        return invoke

    def dispatch(self, name: str, *args: Any) -> None:
        """
        Apply a mutation, record it and advance the pointer.

        Events after the current pointer are discarded first (branch-cut).

        Raises:
            UnknownMutation: If name is not registered
            MutationFactoryError: If the mutation rejects its arguments
        """
        if name not in self._registry:
            self._log.warning("Rejected unknown mutation", extra={"mutation": name})
            raise UnknownMutation(name)

        captured = deepcopy(args) if self._config.copy_args else tuple(args)
        event = Event(name=name, args=captured)
        try:
            new_state = apply_event(self._state, event, self._registry, self._producer)
        except TimelineError as ex:
            self._log.warning(
                "Mutation failed, store unchanged",
                extra={"mutation": name, "error": str(ex)},
            )
            raise

        kept = self._events[: self._pointer + 1]
        events = kept + (event,)
        pointer = len(events) - 1
        discarded = len(self._events) - len(kept)

        self._checkpoints.truncate(self._pointer)
        self._checkpoints.record(pointer, new_state)
        self._events, self._pointer, self._state = events, pointer, new_state

        self._log.debug(
            "Applied mutation",
            extra={"mutation": name, "pointer": pointer, "discarded": discarded},
        )
        self._notify()

    def replay(self, index: int) -> None:
        """
        Time-travel: recompute the state at index without touching the log.

        Args:
            index: Target pointer, -1 for the initial state

        Raises:
            InvalidIndex: If index < -1, is not an int, or (strict policy)
                is past the last event
        """
        target = self._resolve_target(index)
        result = self._fold(target)
        self._state, self._pointer = result.state, result.pointer

        self._log.debug(
            "Replayed history",
            extra={"pointer": result.pointer, "applied": result.applied},
        )
        self._notify()

    def undo(self) -> None:
        """
        Step the pointer back by one event.

        Raises:
            InvalidIndex: If nothing is applied (check can_undo first)
        """
        if not self.can_undo:
            raise InvalidIndex(self._pointer - 1, len(self._events), "nothing to undo")
        self.replay(self._pointer - 1)

    def redo(self) -> None:
        """
        Step the pointer forward by one event.

        Raises:
            InvalidIndex: If the pointer is at the tip (check can_redo first)
        """
        if not self.can_redo:
            raise InvalidIndex(self._pointer + 1, len(self._events), "nothing to redo")
        self.replay(self._pointer + 1)

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with the store after every published transition.

        Returns:
            Function that removes the listener
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Internals

    def _resolve_target(self, index: Any) -> int:
        size = len(self._events)
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidIndex(index, size, f"index must be an int, got {index!r}")
        if index < -1:
            raise InvalidIndex(index, size)
        if index > size - 1:
            if self._config.replay_policy != REPLAY_CLAMP:
                self._log.warning("Rejected replay past the tip", extra={"index": index})
                raise InvalidIndex(index, size)
            self._log.debug("Clamped replay target", extra={"index": index, "tip": size - 1})
            return size - 1
        return index

    def _fold(self, target: int) -> ReplayResult:
        # Start from whichever known state is closest below target: a cached
        # checkpoint or the current state (which equals the fold up to pointer).
        start = self._checkpoints.nearest(target)
        if 0 <= self._pointer <= target and (start is None or start[0] < self._pointer):
            start = (self._pointer, self._state)
        on_step = self._checkpoints.record if self._checkpoints.enabled else None
        return replay(
            self._initial,
            self._events,
            self._registry,
            to_index=target,
            producer=self._producer,
            start=start,
            on_step=on_step,
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                self._log.exception("Subscriber failed", extra={"pointer": self._pointer})

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.store_id!r}, events={len(self._events)}, "
            f"pointer={self._pointer})"
        )
