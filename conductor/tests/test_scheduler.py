"""
Scheduler tests: FIFO order and never running inside schedule().
"""

import asyncio
import threading

import pytest

from conductor.core.events import APPLY_EFFECTS
from conductor.core.reducers import DISPATCH_AFTER, REGISTER_STORE
from conductor.runtime import Conductor
from conductor.scheduler import AsyncioScheduler, ManualScheduler
from conductor.tests.fakes import FakeStore, recorder


def test_manual_scheduler_is_fifo():
    s = ManualScheduler()
    out = []
    for i in range(5):
        s.schedule(lambda i=i: out.append(i))

    assert out == []
    assert s.run_pending() == 5
    assert out == [0, 1, 2, 3, 4]
    assert s.pending() == 0


def test_run_pending_defers_callbacks_scheduled_while_running():
    s = ManualScheduler()
    out = []

    def first():
        out.append("first")
        s.schedule(lambda: out.append("later"))

    s.schedule(first)
    s.schedule(lambda: out.append("second"))

    s.run_pending()
    assert out == ["first", "second"]

    s.run_pending()
    assert out == ["first", "second", "later"]


def test_run_until_idle_stops_runaway_loops():
    s = ManualScheduler()

    def again():
        s.schedule(again)

    s.schedule(again)

    with pytest.raises(RuntimeError):
        s.run_until_idle(max_ticks=10)


def test_manual_scheduler_accepts_other_threads():
    s = ManualScheduler()
    out = []
    threads = [threading.Thread(target=s.schedule, args=(lambda i=i: out.append(i),)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert s.run_until_idle() == 10
    assert sorted(out) == list(range(10))


def test_asyncio_scheduler_drains_on_next_tick():
    calls = []

    async def main():
        conductor = Conductor(scheduler=AsyncioScheduler())
        store = FakeStore("s1", {"init": recorder(calls, "init"), "foo": recorder(calls, "foo")})

        conductor.dispatch(APPLY_EFFECTS, {REGISTER_STORE: store, DISPATCH_AFTER: [["s1/foo", 42]]})
        assert calls == []

        await asyncio.sleep(0)
        assert calls == [("init", ()), ("foo", (42,))]

    asyncio.run(main())


def test_asyncio_scheduler_requires_loop():
    with pytest.raises(RuntimeError):
        AsyncioScheduler()
