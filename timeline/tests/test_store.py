"""
Tests for the event-sourced store: actions, branch-cut, undo/redo, errors.
"""

import pytest

from timeline.core.errors import (
    InvalidHistoryState,
    InvalidIndex,
    MutationFactoryError,
    UnknownMutation,
)
from timeline.config import StoreConfig
from timeline.core.events import Event
from timeline.core.registry import MutationRegistry
from timeline.demo import FORM_MUTATIONS, initial_form
from timeline.replay import replay
from timeline.store import EventSourcedStore


def _fold(store):
    """Full replay from the initial snapshot, independent of the store's cache."""
    registry = MutationRegistry.coerce(FORM_MUTATIONS)
    return replay(store.initial_state, store.events, registry, to_index=store.pointer).state


def test_form_scenario():
    """updateName, toggleAgree, undo, updateAge: the log is cut and redo goes away."""
    store = EventSourcedStore(initial_form(), FORM_MUTATIONS, config=StoreConfig())
    assert store.pointer == -1
    assert store.state == {"name": "", "age": 18, "agree": False}

    store.actions.updateName("Ann")
    assert store.state == {"name": "Ann", "age": 18, "agree": False}
    assert store.pointer == 0
    assert len(store.events) == 1

    store.actions.toggleAgree()
    assert store.state == {"name": "Ann", "age": 18, "agree": True}
    assert store.pointer == 1
    assert len(store.events) == 2

    store.undo()
    assert store.state == {"name": "Ann", "age": 18, "agree": False}
    assert store.pointer == 0
    assert len(store.events) == 2
    assert store.can_redo

    store.actions.updateAge(30)
    assert store.events == (Event("updateName", ("Ann",)), Event("updateAge", (30,)))
    assert store.pointer == 1
    assert store.state == {"name": "Ann", "age": 30, "agree": False}
    assert not store.can_redo


def test_initial_state_not_shared(form_state, make_store):
    """Caller's initial object is copied; mutating it later changes nothing."""
    store = make_store()
    form_state["name"] = "Mallory"

    assert store.state["name"] == ""
    assert store.initial_state["name"] == ""


def test_state_property_returns_copy(store):
    """Mutating the returned state must not reach the store."""
    store.actions.updateName("Ann")
    snapshot = store.state
    snapshot["name"] = "Bob"

    assert store.state["name"] == "Ann"
    assert store.peek()["name"] == "Ann"


def test_branch_cut_length(store):
    """Log of N with pointer k: a new action leaves k+2 events, pointer k+1."""
    for i in range(5):
        store.actions.updateAge(20 + i)
    store.replay(1)

    store.actions.updateName("Zed")

    assert len(store.events) == 3
    assert store.pointer == 2
    assert store.events[-1] == Event("updateName", ("Zed",))
    assert store.state == {"name": "Zed", "age": 21, "agree": False}


def test_branch_cut_from_initial(store):
    """Dispatch at pointer -1 discards the whole log."""
    store.actions.updateName("Ann")
    store.actions.updateAge(40)
    store.replay(-1)

    store.actions.toggleAgree()

    assert store.events == (Event("toggleAgree", ()),)
    assert store.pointer == 0


def test_undo_redo_round_trip(store):
    """undo(); redo() restores the exact state and pointer."""
    store.actions.updateName("Ann")
    store.actions.updateAge(44)
    before_state, before_pointer = store.state, store.pointer

    store.undo()
    store.redo()

    assert store.state == before_state
    assert store.pointer == before_pointer


def test_availability_boundaries(store):
    """No undo at -1, no redo at the tip."""
    assert not store.can_undo
    assert not store.can_redo

    store.actions.toggleAgree()
    assert store.can_undo
    assert not store.can_redo

    store.undo()
    assert not store.can_undo
    assert store.can_redo


def test_unavailable_undo_redo_raise(store):
    """Calling undo/redo when unavailable raises InvalidIndex and changes nothing."""
    with pytest.raises(InvalidIndex):
        store.undo()
    with pytest.raises(InvalidIndex):
        store.redo()
    assert store.pointer == -1


def test_controls_expose_optional_callables(store):
    """controls() carries None for unavailable undo/redo."""
    controls = store.controls()
    assert controls.undo is None
    assert controls.redo is None
    assert controls.pointer == -1

    store.actions.updateName("Ann")
    controls = store.controls()
    assert controls.redo is None
    controls.undo()

    assert store.pointer == -1
    assert store.controls().redo is not None


def test_unknown_mutation_leaves_store_unchanged(store):
    """Unknown name fails with UnknownMutation before anything is recorded."""
    store.actions.updateName("Ann")
    events, pointer, state = store.events, store.pointer, store.state

    with pytest.raises(UnknownMutation) as exc:
        store.dispatch("deleteEverything")
    assert exc.value.name == "deleteEverything"

    with pytest.raises(UnknownMutation):
        store.actions.deleteEverything

    assert store.events == events
    assert store.pointer == pointer
    assert store.state == state


def test_factory_error_leaves_store_unchanged(store):
    """A factory rejecting its arguments propagates as MutationFactoryError."""
    store.actions.updateName("Ann")
    store.actions.toggleAgree()
    store.undo()
    events, pointer, state = store.events, store.pointer, store.state

    with pytest.raises(MutationFactoryError) as exc:
        store.actions.updateAge(-5)

    assert isinstance(exc.value.__cause__, ValueError)
    assert exc.value.name == "updateAge"
    # No branch-cut happened either
    assert store.events == events
    assert store.pointer == pointer
    assert store.state == state


def test_mutator_error_leaves_store_unchanged(form_state):
    """An exception inside the draft mutator aborts the whole action."""
    def explode():
        def mutate(draft):
            draft["name"] = "half-written"
            raise RuntimeError("boom")
        return mutate

    store = EventSourcedStore(form_state, {"explode": explode}, config=StoreConfig())

    with pytest.raises(MutationFactoryError):
        store.actions.explode()

    assert store.events == ()
    assert store.state["name"] == ""


def test_mutator_returning_value_rejected(form_state):
    """Draft mutators mutate in place; returning a replacement is an error."""
    def replace():
        return lambda draft: {"name": "other"}

    store = EventSourcedStore(form_state, {"replace": replace}, config=StoreConfig())

    with pytest.raises(MutationFactoryError):
        store.actions.replace()
    assert store.pointer == -1


def test_arguments_captured_at_call_time(form_state):
    """Mutating an argument after dispatch must not change replay."""
    def set_tags(tags):
        def mutate(draft):
            draft["tags"] = list(tags)
        return mutate

    store = EventSourcedStore(form_state, {"setTags": set_tags}, config=StoreConfig())
    tags = ["a", "b"]
    store.actions.setTags(tags)
    tags.append("c")

    store.replay(-1)
    store.replay(0)

    assert store.state["tags"] == ["a", "b"]
    assert store.events[0].args == (["a", "b"],)


def test_invariant_after_mixed_operations(store):
    """state == fold(initial, events[0..pointer]) after every step."""
    ops = [
        lambda: store.actions.updateName("Ann"),
        lambda: store.actions.updateAge(21),
        lambda: store.actions.toggleAgree(),
        store.undo,
        store.undo,
        store.redo,
        lambda: store.actions.updateName("Bea"),
        lambda: store.replay(-1),
        lambda: store.replay(2),
        store.undo,
        lambda: store.actions.toggleAgree(),
    ]
    for op in ops:
        op()
        assert store.state == _fold(store)


def test_replay_below_minus_one_rejected(store):
    """targetIndex < -1 is always InvalidIndex."""
    store.actions.updateName("Ann")
    with pytest.raises(InvalidIndex):
        store.replay(-2)
    assert store.pointer == 0


def test_replay_non_int_rejected(store):
    """Replay targets must be ints; bools and strings are rejected."""
    store.actions.updateName("Ann")
    with pytest.raises(InvalidIndex):
        store.replay("0")
    with pytest.raises(InvalidIndex):
        store.replay(True)


def test_replay_past_tip_strict(make_store):
    """Strict policy: replay past the last event raises and leaves the pointer."""
    store = make_store(replay_policy="strict")
    store.actions.updateName("Ann")
    store.actions.toggleAgree()
    store.undo()

    with pytest.raises(InvalidIndex) as exc:
        store.replay(5)

    assert exc.value.index == 5
    assert exc.value.size == 2
    assert store.pointer == 0
    assert store.can_redo


def test_replay_past_tip_clamp(make_store):
    """Clamp policy: replay past the last event lands on the tip; redo unavailable."""
    store = make_store(replay_policy="clamp")
    store.actions.updateName("Ann")
    store.actions.toggleAgree()
    store.replay(-1)

    store.replay(99)

    assert store.pointer == 1
    assert store.state == {"name": "Ann", "age": 18, "agree": True}
    assert not store.can_redo
    assert store.can_undo


def test_replay_does_not_truncate(store):
    """Time-travel keeps the whole log."""
    store.actions.updateName("Ann")
    store.actions.updateAge(50)
    store.actions.toggleAgree()

    store.replay(0)

    assert len(store.events) == 3
    assert store.state == {"name": "Ann", "age": 18, "agree": False}


def test_resume_from_event_log(make_store):
    """Supplied log without pointer resumes at the tip."""
    events = [Event("updateName", ("Ann",)), {"name": "updateAge", "args": [30]}]
    store = make_store(events=events)

    assert store.pointer == 1
    assert store.state == {"name": "Ann", "age": 30, "agree": False}
    assert store.events[1] == Event("updateAge", (30,))


def test_resume_with_pointer(make_store):
    """Supplied pointer is replayed immediately."""
    events = [Event("updateName", ("Ann",)), Event("toggleAgree")]
    store = make_store(events=events, pointer=0)

    assert store.state == {"name": "Ann", "age": 18, "agree": False}
    assert store.can_redo


def test_resume_pointer_zero_with_log(make_store):
    """An explicit pointer of 0 is honoured, not treated as missing."""
    events = [Event("updateName", ("Ann",)), Event("updateName", ("Bea",))]
    store = make_store(events=events, pointer=0)

    assert store.pointer == 0
    assert store.state["name"] == "Ann"


@pytest.mark.parametrize("pointer", [-2, 2, 10])
def test_construct_with_bad_pointer(make_store, pointer):
    """Pointer outside [-1, len-1] fails fast with InvalidHistoryState."""
    events = [Event("updateName", ("Ann",)), Event("toggleAgree")]
    with pytest.raises(InvalidHistoryState):
        make_store(events=events, pointer=pointer)


def test_construct_with_unknown_event(make_store):
    """A log naming an unregistered mutation cannot be replayed."""
    with pytest.raises(InvalidHistoryState) as exc:
        make_store(events=[Event("launchRockets")])
    assert isinstance(exc.value.__cause__, UnknownMutation)


def test_with_registry_replays_history(store):
    """Re-supplying a registry rebuilds state from the same history."""
    store.actions.updateName("ann")

    def shout_name(name):
        def mutate(draft):
            draft["name"] = name.upper()
        return mutate

    other = store.with_registry(dict(FORM_MUTATIONS, updateName=shout_name))

    assert other.state["name"] == "ANN"
    assert other.events == store.events
    assert store.state["name"] == "ann"


def test_actions_mapping_access(store):
    """Actions are reachable by attribute, by key, and enumerable."""
    assert "updateName" in store.actions
    assert sorted(store.actions) == ["toggleAgree", "updateAge", "updateName"]
    assert len(store.actions) == 3

    store.actions["updateName"]("Ann")
    assert store.state["name"] == "Ann"


def test_subscribers_notified(store):
    """Listeners see every published transition and can unsubscribe."""
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.pointer))

    store.actions.updateName("Ann")
    store.actions.toggleAgree()
    store.undo()
    store.replay(1)
    unsubscribe()
    store.undo()

    assert seen == [0, 1, 0, 1]


def test_failing_subscriber_isolated(store):
    """One failing listener does not stop the others or roll back the action."""
    seen = []

    def broken(_store):
        raise RuntimeError("listener bug")

    store.subscribe(broken)
    store.subscribe(lambda s: seen.append(s.pointer))

    store.actions.updateName("Ann")

    assert seen == [0]
    assert store.state["name"] == "Ann"


def test_failed_operation_does_not_notify(store):
    """Rejected operations publish nothing."""
    seen = []
    store.subscribe(lambda s: seen.append(s.pointer))

    with pytest.raises(UnknownMutation):
        store.dispatch("nope")
    with pytest.raises(InvalidIndex):
        store.replay(3)

    assert seen == []


def test_state_hash_tracks_state(store):
    """Equal states hash equally; different states differ."""
    h0 = store.state_hash()
    store.actions.toggleAgree()
    h1 = store.state_hash()
    store.undo()

    assert store.state_hash() == h0
    assert h1 != h0


def test_resumed_events_detached_from_caller(form_state):
    """Changing arg data after construction does not change the log or replay."""

    def set_tags(tags):
        def mutate(draft):
            draft["tags"] = list(tags)
        return mutate

    tags = ["a"]
    store = EventSourcedStore(
        form_state, {"setTags": set_tags}, events=[Event("setTags", (tags,))], config=StoreConfig()
    )
    tags.append("b")

    store.replay(-1)
    store.replay(0)
    assert store.events[0].args == (["a"],)
    assert store.state["tags"] == ["a"]
