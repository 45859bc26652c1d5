"""
Tests for the effect reducer table.

Critical: folding must apply effects in insertion order and never leak a
partially folded state.
"""

import pytest

from conductor.core.reducer import EffectTable
from conductor.core.state import GlobalState
from conductor.core.errors import UnknownEffectError


def _set(state, payload):
    return state.with_app_state({**state.app_state, "n": payload})


def _inc(state, payload):
    return state.with_app_state({**state.app_state, "n": state.app_state.get("n", 0) + payload})


def _mul(state, payload):
    return state.with_app_state({**state.app_state, "n": state.app_state.get("n", 0) * payload})


def _table() -> EffectTable:
    t = EffectTable()
    t.register("app/set", _set)
    t.register("app/inc", _inc)
    t.register("app/mul", _mul)
    return t


def test_fold_follows_insertion_order():
    """Reducers aren't associative, so order decides the result."""
    t = _table()
    s0 = GlobalState(app_state={"n": 1})

    assert t.fold(s0, {"app/inc": 5, "app/mul": 2}).app_state == {"n": 12}
    assert t.fold(s0, {"app/mul": 2, "app/inc": 5}).app_state == {"n": 7}


def test_fold_deterministic_output():
    """Same (state, effects) must produce the same output."""
    t = _table()
    s0 = GlobalState()
    effects = {"app/set": 3, "app/inc": 4}

    results = [t.fold(s0, effects) for _ in range(50)]

    assert all(r == results[0] for r in results)
    assert results[0].app_state == {"n": 7}


def test_fold_does_not_mutate_input():
    t = _table()
    s0 = GlobalState()
    original_app_state = s0.app_state

    s1 = t.fold(s0, {"app/set": 42})

    assert s0.app_state is original_app_state
    assert s0.app_state == {}
    assert s1.app_state == {"n": 42}


def test_empty_effect_map_returns_same_state():
    t = _table()
    s0 = GlobalState()

    assert t.fold(s0, {}) is s0


def test_unknown_effect_aborts_fold():
    """An unknown effect anywhere in the map raises, and the input state is untouched."""
    t = _table()
    s0 = GlobalState(app_state={"n": 1})

    with pytest.raises(UnknownEffectError) as exc:
        t.fold(s0, {"app/inc": 1, "app/missing": None, "app/mul": 3})

    assert exc.value.effect_name == "app/missing"
    assert "app/missing" in str(exc.value)
    assert s0.app_state == {"n": 1}


def test_register_replaces_and_contains():
    t = EffectTable()
    t.register("app/set", _inc)
    t.register("app/set", _set)

    assert "app/set" in t
    assert "app/inc" not in t
    assert list(t) == ["app/set"]
    assert t.apply(GlobalState(), "app/set", 9).app_state == {"n": 9}


def test_unknown_effect_checked_before_any_reducer_runs():
    calls = []
    t = _table()
    t.register("app/record", lambda state, payload: calls.append(payload) or state)

    with pytest.raises(UnknownEffectError):
        t.fold(GlobalState(), {"app/record": 1, "app/missing": None})

    assert calls == []
