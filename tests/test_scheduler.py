import asyncio

import pytest

from raffle.core.scheduler import AsyncioScheduler, ManualScheduler


def test_callbacks_fire_in_due_order(scheduler):
    fired = []
    scheduler.schedule(300, lambda: fired.append("c"))
    scheduler.schedule(100, lambda: fired.append("a"))
    scheduler.schedule(200, lambda: fired.append("b"))
    scheduler.schedule(100, lambda: fired.append("a2"))

    assert scheduler.advance(250) == 3
    assert fired == ["a", "a2", "b"]
    assert scheduler.now_ms == 250

    scheduler.advance(50)
    assert fired == ["a", "a2", "b", "c"]


def test_nothing_fires_before_due(scheduler):
    fired = []
    handle = scheduler.schedule(100, lambda: fired.append(1))

    scheduler.advance(99.9)

    assert fired == []
    assert handle.pending
    assert scheduler.pending_count == 1


def test_cancelled_callback_never_fires(scheduler):
    fired = []
    handle = scheduler.schedule(100, lambda: fired.append(1))

    handle.cancel()
    handle.cancel()
    scheduler.advance(1000)

    assert fired == []
    assert handle.cancelled
    assert not handle.fired
    assert scheduler.pending_count == 0


def test_callbacks_scheduled_while_advancing(scheduler):
    fired = []

    def first():
        fired.append(("first", scheduler.now_ms))
        scheduler.schedule(50, lambda: fired.append(("second", scheduler.now_ms)))

    scheduler.schedule(100, first)
    scheduler.advance(200)

    assert fired == [("first", 100), ("second", 150)]


def test_cancel_after_fire_is_harmless(scheduler):
    handle = scheduler.schedule(10, lambda: None)
    scheduler.advance(10)

    handle.cancel()

    assert handle.fired
    assert not handle.cancelled


def test_negative_delays_rejected(scheduler):
    with pytest.raises(ValueError):
        scheduler.schedule(-1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.advance(-1)


def test_run_until_idle(scheduler):
    fired = []
    scheduler.schedule(5000, lambda: fired.append(1))
    scheduler.schedule(7000, lambda: fired.append(2))

    assert scheduler.run_until_idle() == 2
    assert fired == [1, 2]
    assert scheduler.now_ms == 7000


def test_start_time():
    scheduler = ManualScheduler(start_ms=1000)
    handle = scheduler.schedule(500, lambda: None)
    assert handle.due_ms == 1500


def test_asyncio_scheduler_fires_and_cancels():
    fired = []

    async def scenario():
        scheduler = AsyncioScheduler(time_scale=0.001)
        scheduler.schedule(10, lambda: fired.append("kept"))
        dropped = scheduler.schedule(10, lambda: fired.append("dropped"))
        dropped.cancel()
        await asyncio.sleep(0.05)
        return dropped

    dropped = asyncio.run(scenario())

    assert fired == ["kept"]
    assert dropped.cancelled


def test_asyncio_scheduler_rejects_bad_scale():
    with pytest.raises(ValueError):
        AsyncioScheduler(time_scale=0)
