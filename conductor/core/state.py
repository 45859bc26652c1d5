"""
Global state model.

GlobalState is the single source of truth. It is immutable; every change
produces a new instance that the conductor installs through its mutation
gate.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from .events import QueuedEvent


@dataclass(frozen=True)
class GlobalState:
    """
    Immutable state container.

    Fields:
        root_store_id: Id of the mounted root store
        root_view_handle: View host the root store is mounted into
        app_state: Shared, store-agnostic data handed to every handler
        stores: Store registry, store_id -> store
        event_queue: Events waiting for deferred dispatch

    Use the with_*() helpers to derive new states.
    """
    root_store_id: Optional[str] = None
    root_view_handle: Any = None
    app_state: Dict[str, Any] = field(default_factory=dict)
    stores: Dict[str, Any] = field(default_factory=dict)
    event_queue: Tuple[QueuedEvent, ...] = ()

    def get_store(self, store_id: str) -> Any:
        """
        Get a registered store by id.

        Returns:
            Store or None if not registered
        """
        return self.stores.get(store_id)

    def with_store(self, store_id: str, store: Any) -> "GlobalState":
        stores = dict(self.stores)
        stores[store_id] = store
        return replace(self, stores=stores)

    def without_store(self, store_id: str) -> "GlobalState":
        stores = dict(self.stores)
        stores.pop(store_id, None)
        return replace(self, stores=stores)

    def with_queued(self, events: Iterable[QueuedEvent]) -> "GlobalState":
        return replace(self, event_queue=self.event_queue + tuple(events))

    def with_empty_queue(self) -> "GlobalState":
        return replace(self, event_queue=())

    def with_app_state(self, app_state: Dict[str, Any]) -> "GlobalState":
        return replace(self, app_state=app_state)

    def with_root(self, root_store_id: str, root_view_handle: Any) -> "GlobalState":
        return replace(self, root_store_id=root_store_id, root_view_handle=root_view_handle)


def changed_fields(old: GlobalState, new: GlobalState) -> Tuple[str, ...]:
    """Names of top-level fields that differ between two states."""
    names = ("root_store_id", "root_view_handle", "app_state", "stores", "event_queue")
    return tuple(n for n in names if getattr(old, n) != getattr(new, n))
