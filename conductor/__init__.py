"""
Conductor

Uni-directional state management: events -> handlers -> effects -> reducers -> new state.
"""

__version__ = "0.1.0"

from .core import (
    APPLY_EFFECTS,
    ConductorError,
    EffectTable,
    GlobalState,
    LocalState,
    QueuedEvent,
    Store,
    ViewHost,
    make_event_name,
    parse_event_name,
)
from .runtime import Conductor, resolve_handler
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__all__ = [
    "APPLY_EFFECTS",
    "ConductorError",
    "EffectTable",
    "GlobalState",
    "LocalState",
    "QueuedEvent",
    "Store",
    "ViewHost",
    "make_event_name",
    "parse_event_name",
    "Conductor",
    "resolve_handler",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
]
