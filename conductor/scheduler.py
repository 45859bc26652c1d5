"""
Deferred execution schedulers.

The conductor never dispatches queued events inside the call that queued
them. It hands a callback to a Scheduler, which runs it on a later tick of
the host's cooperative loop. Callbacks run in the order they were
scheduled.
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Optional


Callback = Callable[[], None]


class Scheduler(ABC):
    """
    Abstract scheduler interface.

    All implementations must guarantee:
    - Callbacks never run synchronously inside schedule()
    - FIFO order between callbacks
    - schedule() is safe to call from other threads
    """

    @abstractmethod
    def schedule(self, callback: Callback) -> None:
        ...


class ManualScheduler(Scheduler):
    """
    Explicit task queue drained by the host.

    Usage:
        scheduler = ManualScheduler()
        conductor = Conductor(scheduler=scheduler)
        conductor.dispatch("s1/click")
        scheduler.run_until_idle()
    """

    def __init__(self) -> None:
        self._tasks: Deque[Callback] = deque()
        self._lock = threading.Lock()

    def schedule(self, callback: Callback) -> None:
        with self._lock:
            self._tasks.append(callback)

    def pending(self) -> int:
        with self._lock:
            return len(self._tasks)

    def _pop(self) -> Optional[Callback]:
        with self._lock:
            return self._tasks.popleft() if self._tasks else None

    def run_pending(self) -> int:
        """
        Run callbacks that were scheduled before this call.

        Callbacks scheduled while running wait for the next tick.

        Returns:
            Number of callbacks run
        """
        count = self.pending()
        for _ in range(count):
            callback = self._pop()
            if callback is None:
                break
            callback()
        return count

    def run_until_idle(self, max_ticks: int = 1000) -> int:
        """
        Run ticks until no callbacks are left.

        Raises:
            RuntimeError: If the queue is still busy after max_ticks
        """
        total = 0
        for _ in range(max_ticks):
            ran = self.run_pending()
            if ran == 0:
                return total
            total += ran
        raise RuntimeError(f"Scheduler still busy after {max_ticks} ticks")


class AsyncioScheduler(Scheduler):
    """Runs callbacks on the next iteration of an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self.loop = loop or asyncio.get_running_loop()

    def schedule(self, callback: Callback) -> None:
        self.loop.call_soon_threadsafe(callback)
