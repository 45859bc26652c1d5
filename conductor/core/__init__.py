"""
Core state-management primitives.

This module provides the pure building blocks of the conductor:
- Events: Namespaced event names and queued events
- State: Immutable global state container
- Store: Store contract and local state cell
- EffectTable: Registry of effect reducers and the fold
- Reducers: Built-in store lifecycle and queue reducers
"""

from .events import APPLY_EFFECTS, EventName, QueuedEvent, make_event_name, parse_event_name
from .state import GlobalState
from .store import Handler, LocalState, Store, ViewHost
from .reducer import EffectReducer, EffectTable
from .reducers import (
    CHANGE_STORE_STATE,
    DEREGISTER_STORE,
    DISPATCH_AFTER,
    DISSOC_STORE,
    REGISTER_STORE,
    register_builtin_reducers,
)
from .errors import (
    ConductorError,
    ConfigError,
    InvalidStoreError,
    MissingLocalStateError,
    ReentrantDispatchError,
    UnknownEffectError,
)

__all__ = [
    "APPLY_EFFECTS",
    "EventName",
    "QueuedEvent",
    "make_event_name",
    "parse_event_name",
    "GlobalState",
    "Handler",
    "LocalState",
    "Store",
    "ViewHost",
    "EffectReducer",
    "EffectTable",
    "CHANGE_STORE_STATE",
    "DEREGISTER_STORE",
    "DISPATCH_AFTER",
    "DISSOC_STORE",
    "REGISTER_STORE",
    "register_builtin_reducers",
    "ConductorError",
    "ConfigError",
    "InvalidStoreError",
    "MissingLocalStateError",
    "ReentrantDispatchError",
    "UnknownEffectError",
]
