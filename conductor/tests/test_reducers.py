"""
Tests for the built-in effect reducers.
"""

import logging

import pytest

from conductor.core.events import APPLY_EFFECTS, QueuedEvent
from conductor.core.reducers import (
    DISSOC_STORE,
    add_dispatch_to_queue,
    change_store_state,
    deregister_store,
    dissoc_store,
    register_store,
    validate_store,
)
from conductor.core.state import GlobalState
from conductor.core.store import LocalState
from conductor.core.errors import InvalidStoreError, MissingLocalStateError
from conductor.tests.fakes import FakeStore


def _noop(store, app_state, *params):
    return {}


def test_register_store_inserts_and_queues_init():
    store = FakeStore("s1", {"init": _noop})

    st = register_store(GlobalState(), store)

    assert st.get_store("s1") is store
    assert st.event_queue == (QueuedEvent("s1/init"),)


def test_register_store_without_init_handler_queues_nothing():
    st = register_store(GlobalState(), FakeStore("s1"))

    assert "s1" in st.stores
    assert st.event_queue == ()


def test_register_store_overwrite_warns(caplog):
    first = FakeStore("s1")
    second = FakeStore("s1")
    st = register_store(GlobalState(), first)

    with caplog.at_level(logging.WARNING, logger="conductor.core.reducers"):
        st = register_store(st, second)

    assert st.get_store("s1") is second
    assert "already been registered" in caplog.text


def test_register_store_does_not_mutate_input():
    s0 = GlobalState()

    register_store(s0, FakeStore("s1", {"init": _noop}))

    assert s0.stores == {}
    assert s0.event_queue == ()


@pytest.mark.parametrize("store_id", ["", "a/b", "conductor", 7, None])
def test_validate_store_rejects_bad_ids(store_id):
    with pytest.raises(InvalidStoreError):
        validate_store(FakeStore(store_id))


def test_validate_store_rejects_non_callable_handler():
    with pytest.raises(InvalidStoreError):
        validate_store(FakeStore("s1", {"init": "not callable"}))


def test_validate_store_rejects_non_store():
    with pytest.raises(InvalidStoreError):
        validate_store(object())


def test_deregister_store_queues_remove_then_dissoc():
    store = FakeStore("s1")
    st = register_store(GlobalState(), store)

    st = deregister_store(st, store)

    assert "s1" in st.stores
    assert st.event_queue == (
        QueuedEvent("s1/remove"),
        QueuedEvent(APPLY_EFFECTS, ({DISSOC_STORE: store},)),
    )


def test_dissoc_store_removes_entry():
    store = FakeStore("s1")
    st = register_store(GlobalState(), store)

    assert dissoc_store(st, store).stores == {}
    assert dissoc_store(GlobalState(), store).stores == {}


def test_dispatch_after_appends_without_dispatching():
    s0 = GlobalState(event_queue=(QueuedEvent("s1/a"),))

    st = add_dispatch_to_queue(s0, [["s1/foo", 42], ["s1/bar"]])

    assert st.event_queue == (
        QueuedEvent("s1/a"),
        QueuedEvent("s1/foo", (42,)),
        QueuedEvent("s1/bar"),
    )


def test_change_store_state_pair_payload():
    cell = LocalState({"count": 0})
    st = register_store(GlobalState(), FakeStore("s1", local_state=cell))

    out = change_store_state(st, ("s1", {"count": 1}))

    assert out is st
    assert cell.get() == {"count": 1}


def test_change_store_state_mapping_payload():
    cell = LocalState()
    st = register_store(GlobalState(), FakeStore("s1", local_state=cell))

    change_store_state(st, {"store_id": "s1", "new_value": "ready"})

    assert cell.get() == "ready"


def test_change_store_state_without_cell_is_fatal():
    st = register_store(GlobalState(), FakeStore("s1"))

    with pytest.raises(MissingLocalStateError) as exc:
        change_store_state(st, ("s1", 1))
    assert exc.value.store_id == "s1"


def test_change_store_state_unregistered_store_is_fatal():
    with pytest.raises(MissingLocalStateError):
        change_store_state(GlobalState(), ("ghost", 1))
