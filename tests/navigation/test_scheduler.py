import asyncio

import pytest

from mes_backend.navigation import Debouncer, LoopScheduler, ManualScheduler


def test_manual_scheduler_runs_due_tasks_in_order():
    scheduler = ManualScheduler()
    ran = []
    scheduler.call_later(20, lambda: ran.append("b"))
    scheduler.call_later(10, lambda: ran.append("a"))
    scheduler.call_later(20, lambda: ran.append("c"))

    assert scheduler.advance(15) == 1
    assert scheduler.advance(5) == 2
    assert ran == ["a", "b", "c"]
    assert scheduler.now_ms == 20


def test_cancelled_task_never_runs():
    scheduler = ManualScheduler()
    ran = []
    task = scheduler.call_later(10, lambda: ran.append("x"))

    task.cancel()
    scheduler.advance(50)

    assert task.cancelled()
    assert ran == []
    assert scheduler.pending == 0


def test_run_all_drains_tasks_scheduled_by_tasks():
    scheduler = ManualScheduler()
    ran = []
    scheduler.call_later(5, lambda: scheduler.call_later(5, lambda: ran.append("nested")))

    scheduler.run_all()

    assert ran == ["nested"]
    assert scheduler.now_ms == 10


def test_errors_go_to_the_hook():
    errors = []
    scheduler = ManualScheduler(on_error=errors.append)
    ran = []

    def explode():
        raise KeyError("x")

    scheduler.call_later(1, explode)
    scheduler.call_later(2, lambda: ran.append("after"))
    scheduler.advance(2)

    assert isinstance(errors[0], KeyError)
    assert ran == ["after"]


def test_debouncer_fires_once_after_quiet_period():
    scheduler = ManualScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 150, lambda: calls.append(scheduler.now_ms))

    debouncer.trigger()
    scheduler.advance(100)
    debouncer.trigger()
    scheduler.advance(100)
    assert calls == []

    scheduler.advance(50)
    assert calls == [250]
    assert debouncer.pending is False


@pytest.mark.asyncio
async def test_loop_scheduler_runs_and_cancels():
    scheduler = LoopScheduler()
    ran = []

    scheduler.call_later(5, lambda: ran.append("kept"))
    dropped = scheduler.call_later(5, lambda: ran.append("dropped"))
    dropped.cancel()
    await asyncio.sleep(0.05)

    assert ran == ["kept"]
    assert dropped.cancelled()


@pytest.mark.asyncio
async def test_loop_scheduler_reports_errors():
    errors = []
    scheduler = LoopScheduler(on_error=errors.append)

    def explode():
        raise RuntimeError("late")

    scheduler.call_later(1, explode)
    await asyncio.sleep(0.05)

    assert len(errors) == 1
