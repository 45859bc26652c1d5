"""
Built-in effect reducers.

All reducers take (state, payload) and return a new GlobalState. Store
lifecycle is handled here: registration inserts the store and queues its
init event, deregistration queues the store's remove event followed by the
private dissoc effect so removal goes through the same fold pipeline.
"""

import logging
from typing import Any, Iterable, Mapping, Tuple

from .events import APPLY_EFFECTS, RESERVED_NAMESPACE, SEPARATOR, QueuedEvent, make_event_name
from .state import GlobalState
from .errors import InvalidStoreError, MissingLocalStateError

logger = logging.getLogger(__name__)

REGISTER_STORE = "conductor/register-store"
DEREGISTER_STORE = "conductor/deregister-store"
DISPATCH_AFTER = "conductor/dispatch-after"
CHANGE_STORE_STATE = "conductor/change-store-state"
DISSOC_STORE = "conductor/_dissoc-store"

INIT_EVENT = "init"
REMOVE_EVENT = "remove"


def register_builtin_reducers(table) -> None:
    table.register(REGISTER_STORE, register_store)
    table.register(DEREGISTER_STORE, deregister_store)
    table.register(DISPATCH_AFTER, add_dispatch_to_queue)
    table.register(CHANGE_STORE_STATE, change_store_state)
    table.register(DISSOC_STORE, dissoc_store)


def validate_store(store: Any) -> str:
    """
    Check a store against the store contract and return its id.

    Raises:
        InvalidStoreError: If the id or events map is malformed
    """
    try:
        store_id = store.get_id()
        events = store.events()
    except AttributeError as e:
        raise InvalidStoreError(f"Object {store!r} doesn't implement the store contract: {e}") from e

    if not isinstance(store_id, str) or not store_id:
        raise InvalidStoreError(f"Store id must be a non-empty string, got {store_id!r}")
    if SEPARATOR in store_id:
        raise InvalidStoreError(f"Store id can't contain '{SEPARATOR}': {store_id}")
    if store_id == RESERVED_NAMESPACE:
        raise InvalidStoreError(f"Store id '{RESERVED_NAMESPACE}' is reserved")
    if not isinstance(events, Mapping):
        raise InvalidStoreError(f"Store {store_id} events() must return a mapping")
    for name, handler in events.items():
        if not callable(handler):
            raise InvalidStoreError(f"Handler '{name}' of store {store_id} is not callable")
    return store_id


def add_dispatch_to_queue(state: GlobalState, events: Iterable[Any]) -> GlobalState:
    """
    Queue events to dispatch after the current dispatch finishes.

    Each item is a QueuedEvent or a sequence [event_name, *params], passed
    unchanged to dispatch, e.g.:

        [["conductor/apply-effects", {"conductor/deregister-store": store1}],
         ["cgql/request", query]]
    """
    return state.with_queued(QueuedEvent.coerce(e) for e in events)


def register_store(state: GlobalState, store: Any) -> GlobalState:
    """
    Insert a store into the registry, replacing any store with the same id.

    Queues the store's init event when it declares an init handler.
    """
    store_id = validate_store(store)
    if state.get_store(store_id) is not None:
        logger.warning("Replacing store that has already been registered before: %s", store_id)

    st = state.with_store(store_id, store)
    if INIT_EVENT in store.events():
        st = add_dispatch_to_queue(st, [[make_event_name(store_id, INIT_EVENT)]])
    return st


def deregister_store(state: GlobalState, store: Any) -> GlobalState:
    """Queue the store's remove event, then its removal from the registry."""
    store_id = store.get_id()
    return add_dispatch_to_queue(state, [
        [make_event_name(store_id, REMOVE_EVENT)],
        [APPLY_EFFECTS, {DISSOC_STORE: store}],
    ])


def dissoc_store(state: GlobalState, store: Any) -> GlobalState:
    """
    Remove a store from the registry.

    After that the store can't receive events. Use deregister_store instead
    of calling this directly.
    """
    return state.without_store(store.get_id())


def _unpack_change(payload: Any) -> Tuple[str, Any]:
    if isinstance(payload, Mapping):
        return payload["store_id"], payload["new_value"]
    store_id, new_value = payload
    return store_id, new_value


def change_store_state(state: GlobalState, payload: Any) -> GlobalState:
    """
    Replace the contents of a store's local state cell.

    Payload is (store_id, new_value) or {"store_id": ..., "new_value": ...}.
    Global state is returned unchanged.

    Raises:
        MissingLocalStateError: If the store isn't registered or has no cell
    """
    store_id, new_value = _unpack_change(payload)
    logger.debug("Updating local state of store: %s", store_id)

    store = state.get_store(store_id)
    cell = getattr(store, "local_state", None)
    if cell is None:
        raise MissingLocalStateError(store_id)

    cell.reset(new_value)
    return state
