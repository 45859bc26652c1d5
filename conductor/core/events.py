"""
Event names and queued events.

Event names are namespaced strings "{store_id}/{local_name}". The namespace
addresses a registered store, the local part names a handler in that
store's events() map.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple, Union

SEPARATOR = "/"

# Namespace of the control event and the built-in effects.
RESERVED_NAMESPACE = "conductor"

# Reserved control event: its single parameter is an effect map.
APPLY_EFFECTS = f"{RESERVED_NAMESPACE}{SEPARATOR}apply-effects"


@dataclass(frozen=True)
class EventName:
    """Parsed event name."""
    store_id: str
    local_name: str

    def __str__(self) -> str:
        return make_event_name(self.store_id, self.local_name)


def make_event_name(store_id: str, local_name: str) -> str:
    """
    Build a canonical event name for a store's handler.

    Example:
        make_event_name("s1", "init") -> "s1/init"
    """
    return f"{store_id}{SEPARATOR}{local_name}"


def parse_event_name(event_name: str) -> EventName:
    """Split an event name into its store id and local name."""
    store_id, _, local_name = event_name.partition(SEPARATOR)
    return EventName(store_id=store_id, local_name=local_name)


@dataclass(frozen=True)
class QueuedEvent:
    """
    Event waiting for deferred dispatch.

    Fields:
        event_name: Full event name (may be APPLY_EFFECTS)
        params: Positional parameters passed to dispatch
    """
    event_name: str
    params: Tuple[Any, ...] = field(default_factory=tuple)

    @staticmethod
    def coerce(item: Union["QueuedEvent", Iterable[Any]]) -> "QueuedEvent":
        """
        Accept a QueuedEvent or a sequence [event_name, *params].

        Raises:
            ValueError: If the sequence is empty
        """
        if isinstance(item, QueuedEvent):
            return item
        if isinstance(item, str):
            return QueuedEvent(event_name=item)
        parts = list(item)
        if not parts:
            raise ValueError("Queued event must have an event name")
        return QueuedEvent(event_name=parts[0], params=tuple(parts[1:]))
