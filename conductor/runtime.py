"""
Conductor runtime: the dispatcher and the mutation gate.

Flow of one dispatch:

    dispatch(event_name, *params)
        -> resolve handler on the addressed store
        -> handler(store, app_state, *params) returns an effect map
        -> EffectTable.fold(state, effects)
        -> _mutate(new_state) notifies watchers
        -> event queue watcher moves queued events to the scheduler

Handlers must not call dispatch. Events that have to follow the current
one are queued with the conductor/dispatch-after effect and run on a later
scheduler tick.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .core.events import APPLY_EFFECTS, QueuedEvent, parse_event_name
from .core.state import GlobalState, changed_fields
from .core.store import Handler, Store, ViewHost
from .core.reducer import EffectReducer, EffectTable
from .core.reducers import REGISTER_STORE, register_builtin_reducers, validate_store
from .core.errors import ConductorError, ReentrantDispatchError
from .config import ConductorConfig
from .logging_config import get_logger
from .query import QueryClient, register_query_reducer
from .scheduler import ManualScheduler, Scheduler

logger = logging.getLogger(__name__)

# Watch signature: (key, conductor, old_state, new_state) -> None
Watch = Callable[[str, "Conductor", GlobalState, GlobalState], None]


@dataclass(frozen=True)
class BoundHandler:
    """Handler resolved for an event, together with the store it belongs to."""
    store: Any
    handler: Handler

    def __call__(self, app_state: Mapping[str, Any], params: Sequence[Any]) -> Optional[Mapping[str, Any]]:
        return self.handler(self.store, app_state, *params)


def resolve_handler(state: GlobalState, event_name: str) -> Optional[BoundHandler]:
    """
    Find the handler for an event in a state snapshot.

    Returns:
        BoundHandler, or None when the store or its handler doesn't exist
    """
    name = parse_event_name(event_name)
    store = state.get_store(name.store_id)
    if store is None:
        return None
    handler = store.events().get(name.local_name)
    if handler is None:
        return None
    return BoundHandler(store=store, handler=handler)


class Conductor:
    """
    Owner of the global state.

    Usage:
        scheduler = ManualScheduler()
        conductor = Conductor(scheduler=scheduler)
        conductor.mount(root_store, host)
        scheduler.run_until_idle()
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        effects: Optional[EffectTable] = None,
    ) -> None:
        self.scheduler = scheduler or ManualScheduler()
        if effects is None:
            effects = EffectTable()
            register_builtin_reducers(effects)
        self.effects = effects
        self._state = GlobalState()
        self._watches: Dict[str, Watch] = {}
        self._dispatching = False
        self.init()

    @classmethod
    def from_config(
        cls, config: Optional[ConductorConfig] = None, scheduler: Optional[Scheduler] = None
    ) -> "Conductor":
        """Create a conductor with the cgql/request effect wired to config.query_url."""
        config = config or ConductorConfig.from_env()
        conductor = cls(scheduler=scheduler)
        client = QueryClient(config.query_url, dispatch=conductor.dispatch_soon, timeout=config.query_timeout)
        register_query_reducer(conductor.effects, client)
        return conductor

    def init(self) -> None:
        """Install the watchers the conductor needs to run."""
        self.add_watch("state-change-log", _state_change_log)
        self.add_watch("event-queue-dispatcher", _event_queue_watcher)

    @property
    def state(self) -> GlobalState:
        return self._state

    def add_watch(self, key: str, watch: Watch) -> None:
        self._watches[key] = watch

    def remove_watch(self, key: str) -> None:
        self._watches.pop(key, None)

    def register_effect(self, effect_name: str, reducer: EffectReducer) -> None:
        """Add an application effect reducer to this conductor's table."""
        self.effects.register(effect_name, reducer)

    def _mutate(self, new_state: GlobalState) -> GlobalState:
        """
        Install a new state. State must never be changed outside this method.

        A watch may install a newer state itself; watches after it were
        already notified of that state, so notification stops there.
        """
        old_state = self._state
        self._state = new_state
        for key, watch in list(self._watches.items()):
            watch(key, self, old_state, new_state)
            if self._state is not new_state:
                break
        return self._state

    def dispatch(self, event_name: str, *params: Any) -> GlobalState:
        """
        Dispatch an event and apply the effects its handler produces.

        The reserved conductor/apply-effects event takes an effect map as
        its single parameter and skips handler lookup. Events for a missing
        store or handler are logged and ignored.

        Returns:
            The state installed after the dispatch

        Raises:
            ReentrantDispatchError: If called while another dispatch runs
            UnknownEffectError: If the effect map names an unknown effect
        """
        if self._dispatching:
            raise ReentrantDispatchError(
                f"Can't dispatch '{event_name}' inside another dispatch, use conductor/dispatch-after"
            )

        log = get_logger(__name__, trace_id=event_name)
        log.debug("Dispatching event with params: %r", params)

        self._dispatching = True
        try:
            state = self._state
            if event_name == APPLY_EFFECTS:
                effects = params[0] if params else None
            else:
                effects = self._apply_handler(state, event_name, params, log)

            if not effects:
                return state

            log.debug("Reducing effects: %s", list(effects))
            return self._mutate(self.effects.fold(state, effects))
        finally:
            self._dispatching = False

    def _apply_handler(
        self, state: GlobalState, event_name: str, params: Sequence[Any], log: logging.LoggerAdapter
    ) -> Optional[Mapping[str, Any]]:
        bound = resolve_handler(state, event_name)
        if bound is None:
            log.warning("Unable to find handler function for event: %s. Skipping!", event_name)
            return None
        # handlers only get the shared app_state, not the whole container
        return bound(state.app_state, params)

    def dispatch_soon(self, event_name: str, *params: Any) -> None:
        """Dispatch on the next scheduler tick. Safe to call from other threads."""
        self.scheduler.schedule(partial(self.dispatch, event_name, *params))

    def _schedule_dispatch(self, events: Sequence[QueuedEvent]) -> None:
        logger.debug("Scheduled events for dispatch: %s", [e.event_name for e in events])
        self.scheduler.schedule(partial(self._drain, events))

    def _drain(self, events: Sequence[QueuedEvent]) -> None:
        for event in events:
            self.dispatch(event.event_name, *event.params)

    def mount(self, root_store: Store, host: ViewHost) -> GlobalState:
        """
        Mount the root store of an application.

        Records the root store and view host, renders the root store's
        view into the host and registers the store.
        """
        store_id = validate_store(root_store)
        logger.info("Mounting app: %s", store_id)
        self._mutate(self._state.with_root(store_id, host))
        host.mount(root_store.render())
        return self.dispatch(APPLY_EFFECTS, {REGISTER_STORE: root_store})

    def redraw(self) -> None:
        """Dev tool: render the root store into its view host again."""
        state = self._state
        root_store = state.get_store(state.root_store_id) if state.root_store_id else None
        if root_store is None or state.root_view_handle is None:
            raise ConductorError("No root store is mounted")
        state.root_view_handle.mount(root_store.render())


def _state_change_log(key: str, conductor: Conductor, old: GlobalState, new: GlobalState) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Global app state changed. Changed fields: %s", ", ".join(changed_fields(old, new)))


def _event_queue_watcher(key: str, conductor: Conductor, old: GlobalState, new: GlobalState) -> None:
    """Move queued events out of the state and schedule them for the next tick."""
    if not new.event_queue:
        return
    current = conductor.state
    queued = current.event_queue
    if queued:
        conductor._mutate(current.with_empty_queue())
        conductor._schedule_dispatch(queued)
