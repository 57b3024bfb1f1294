"""
Shared fixtures: the sign-up form registry and a store factory.
"""

import pytest

from timeline.config import StoreConfig
from timeline.demo import FORM_MUTATIONS, initial_form
from timeline.store import EventSourcedStore


@pytest.fixture
def form_state():
    return initial_form()


@pytest.fixture
def make_store(form_state):
    """Build a form store; keyword arguments override StoreConfig fields."""

    def _make(events=None, pointer=None, **config):
        return EventSourcedStore(
            form_state,
            FORM_MUTATIONS,
            events=events,
            pointer=pointer,
            config=StoreConfig(**config),
        )

    return _make


@pytest.fixture
def store(make_store):
    return make_store()
