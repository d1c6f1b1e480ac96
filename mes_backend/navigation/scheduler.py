"""
Deferred callbacks with cancel handles.

`ManualScheduler` runs on a virtual clock that is advanced explicitly, which is
how the page is simulated and tested. `LoopScheduler` defers onto a running
asyncio event loop.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from mes_shared import get_logger

logger = get_logger(__name__)

ErrorHook = Callable[[BaseException], None]


class ScheduledTask(Protocol):
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask: ...


def _run_guarded(callback: Callable[[], None], on_error: Optional[ErrorHook]) -> None:
    try:
        callback()
    except Exception as exc:
        if on_error is None:
            logger.error("Deferred callback failed: %s", exc, exc_info=True)
        else:
            on_error(exc)


@dataclass(order=True)
class _ManualTask:
    due_ms: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    _cancelled: bool = field(default=False, compare=False)

    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Virtual-clock scheduler. Nothing runs until `advance()` is called."""

    def __init__(self, on_error: Optional[ErrorHook] = None):
        self.now_ms = 0.0
        self.on_error = on_error
        self._queue: list[_ManualTask] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _ManualTask:
        task = _ManualTask(self.now_ms + max(0.0, float(delay_ms)), next(self._seq), callback)
        heapq.heappush(self._queue, task)
        return task

    @property
    def pending(self) -> int:
        return sum(1 for t in self._queue if not t.cancelled())

    def advance(self, delay_ms: float) -> int:
        """Move the clock forward, running due tasks in order. Returns how many ran."""
        target = self.now_ms + max(0.0, float(delay_ms))
        ran = 0
        while self._queue and self._queue[0].due_ms <= target:
            task = heapq.heappop(self._queue)
            if task.cancelled():
                continue
            self.now_ms = task.due_ms
            _run_guarded(task.callback, self.on_error)
            ran += 1
        self.now_ms = target
        return ran

    def run_all(self) -> int:
        """Run everything currently queued, including tasks those tasks schedule."""
        ran = 0
        while self._queue:
            ran += self.advance(self._queue[0].due_ms - self.now_ms)
        return ran


class LoopScheduler:
    """Schedules callbacks on an asyncio loop; `loop.call_later` handles cancel."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None, on_error: Optional[ErrorHook] = None):
        self._loop = loop
        self.on_error = on_error

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        delay_s = max(0.0, float(delay_ms)) / 1000.0
        return self.loop.call_later(delay_s, _run_guarded, callback, self.on_error)


class Debouncer:
    """Trailing debounce: a burst of `trigger()` calls runs `callback` once, `wait_ms` after the last."""

    def __init__(self, scheduler: Scheduler, wait_ms: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.wait_ms = wait_ms
        self.callback = callback
        self._task: Optional[ScheduledTask] = None

    @property
    def pending(self) -> bool:
        return self._task is not None

    def trigger(self, *_args: object) -> None:
        self.cancel()
        self._task = self.scheduler.call_later(self.wait_ms, self._fire)

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()

    def _fire(self) -> None:
        self._task = None
        self.callback()
