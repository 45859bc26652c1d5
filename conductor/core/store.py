"""
Store contract.

A store is a piece of business logic with its own id, view and event
handlers. Stores are registered into global state through the
conductor/register-store effect and addressed by event names whose
namespace is the store id.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional

# Handler signature: (store, app_state, *params) -> effect map
Handler = Callable[..., Optional[Mapping[str, Any]]]


class LocalState:
    """
    Private mutable cell owned by a store.

    Only the conductor/change-store-state effect writes to it.
    """

    def __init__(self, value: Any = None) -> None:
        self._value = value

    def get(self) -> Any:
        return self._value

    def reset(self, value: Any) -> Any:
        self._value = value
        return value

    def __repr__(self) -> str:
        return f"LocalState({self._value!r})"


class Store(ABC):
    """
    Base class for stores.

    Subclasses implement get_id(), render() and events(). A store that
    keeps state outside the global container sets `local_state` to a
    LocalState cell.
    """

    local_state: Optional[LocalState] = None

    @abstractmethod
    def get_id(self) -> str:
        """
        Return the store id.

        Must be unique across the application since it keys the store
        registry and namespaces the store's events.
        """
        ...

    @abstractmethod
    def render(self) -> Any:
        """
        Return a view node for the host view system.

        Must not trigger side effects.
        """
        ...

    def events(self) -> Dict[str, Handler]:
        """Return local event name -> handler. Default: no events."""
        return {}


class ViewHost(ABC):
    """Target the root store's view is mounted into."""

    @abstractmethod
    def mount(self, node: Any) -> None:
        ...
