"""
Effect reducer table.

Effect reducers are the only way global state changes. Each one is a
function (state, payload) -> new_state. Folding an effect map applies its
entries in insertion order; an unknown effect name aborts the whole fold.
"""

import logging
from typing import Any, Callable, Dict, Iterator, Mapping

from .state import GlobalState
from .errors import UnknownEffectError

logger = logging.getLogger(__name__)

# Reducer signature: (state, payload) -> new_state
EffectReducer = Callable[[GlobalState, Any], GlobalState]


class EffectTable:
    """
    Registry of effect reducers.

    Usage:
        table = EffectTable()
        table.register("conductor/dispatch-after", add_dispatch_to_queue)
        new_state = table.fold(state, {"conductor/dispatch-after": [["s1/foo", 42]]})
    """

    def __init__(self) -> None:
        self._reducers: Dict[str, EffectReducer] = {}

    def register(self, effect_name: str, reducer: EffectReducer) -> None:
        """
        Register effect reducer.

        Args:
            effect_name: Namespaced effect name
            reducer: Function (state, payload) -> new_state
        """
        self._reducers[effect_name] = reducer

    def __contains__(self, effect_name: object) -> bool:
        return effect_name in self._reducers

    def __iter__(self) -> Iterator[str]:
        return iter(self._reducers)

    def apply(self, state: GlobalState, effect_name: str, payload: Any) -> GlobalState:
        """
        Reduce one effect.

        Raises:
            UnknownEffectError: If no reducer is registered for effect_name
        """
        reducer = self._reducers.get(effect_name)
        if reducer is None:
            raise UnknownEffectError(effect_name)

        logger.debug("Running reducer for '%s'", effect_name)
        return reducer(state, payload)

    def fold(self, state: GlobalState, effects: Mapping[str, Any]) -> GlobalState:
        """
        Reduce an effect map into a new state.

        The input state is never modified. Every effect name is checked
        before the first reducer runs, so an unknown effect aborts the fold
        without side effects. If a reducer raises, the exception propagates
        and no partially folded state escapes.

        Args:
            state: State to fold from
            effects: Ordered effect name -> payload

        Returns:
            State after every effect has been applied
        """
        for effect_name in effects:
            if effect_name not in self._reducers:
                raise UnknownEffectError(effect_name)

        st = state
        for effect_name, payload in effects.items():
            st = self.apply(st, effect_name, payload)
        return st
