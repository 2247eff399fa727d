import asyncio

import pytest

from jumper.config import EngineSettings
from jumper.scheduling import AsyncioScheduler, ManualScheduler
from jumper.simulation import RunState, Simulation


def test_tick_callbacks_run_once_on_the_next_frame():
    scheduler = ManualScheduler()
    calls = []
    scheduler.schedule_tick(lambda: calls.append("a"))
    assert calls == []
    assert scheduler.run_frame() == 1
    assert calls == ["a"]
    assert scheduler.run_frame() == 0


def test_ticks_requested_during_a_frame_wait_for_the_next_one():
    scheduler = ManualScheduler()
    calls = []

    def chain():
        calls.append(scheduler.frame)
        scheduler.schedule_tick(chain)

    scheduler.schedule_tick(chain)
    scheduler.run_frames(3)
    assert calls == [1, 2, 3]


def test_cancel_inside_a_frame_skips_the_cancelled_callback():
    scheduler = ManualScheduler()
    calls = []
    handles = {}
    handles["first"] = scheduler.schedule_tick(lambda: scheduler.cancel(handles["second"]))
    handles["second"] = scheduler.schedule_tick(lambda: calls.append("second"))
    assert scheduler.run_frame() == 1
    assert calls == []


def test_intervals_fire_in_due_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.schedule_interval(lambda: calls.append(("slow", scheduler.now_ms)), 300)
    scheduler.schedule_interval(lambda: calls.append(("fast", scheduler.now_ms)), 200)
    assert scheduler.advance(600) == 5
    assert calls == [
        ("fast", 200),
        ("slow", 300),
        ("fast", 400),
        # Same due time: the interval scheduled first fires first
        ("slow", 600),
        ("fast", 600),
    ]
    assert scheduler.now_ms == 600


def test_cancel_is_benign_for_unknown_and_stale_handles():
    scheduler = ManualScheduler()
    handle = scheduler.schedule_tick(lambda: None)
    scheduler.run_frame()
    scheduler.cancel(handle)
    scheduler.cancel(handle)
    scheduler.cancel(None)
    scheduler.cancel(12345)

    interval = scheduler.schedule_interval(lambda: None, 10)
    scheduler.cancel(interval)
    scheduler.cancel(interval)
    assert scheduler.advance(100) == 0


def test_non_positive_interval_is_rejected():
    with pytest.raises(ValueError):
        ManualScheduler().schedule_interval(lambda: None, 0)
    with pytest.raises(ValueError):
        AsyncioScheduler(frame_rate=0)


def test_asyncio_scheduler_ticks_and_cancels():
    async def scenario():
        scheduler = AsyncioScheduler(frame_rate=200)
        ticks, spawns = [], []
        tick = scheduler.schedule_tick(lambda: ticks.append(1))
        interval = scheduler.schedule_interval(lambda: spawns.append(1), 5)
        await asyncio.sleep(0.1)
        scheduler.cancel(interval)
        scheduler.cancel(tick)
        fired = len(spawns)
        await asyncio.sleep(0.05)
        scheduler.cancel(interval)
        scheduler.cancel(None)
        return ticks, spawns, fired

    ticks, spawns, fired = asyncio.run(scenario())
    assert ticks == [1]
    assert fired >= 1
    assert len(spawns) == fired


def test_asyncio_interval_survives_a_failing_callback(caplog):
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("spawn failed")

    async def scenario():
        scheduler = AsyncioScheduler()
        interval = scheduler.schedule_interval(flaky, 5)
        for _ in range(100):
            if len(calls) >= 3:
                break
            await asyncio.sleep(0.01)
        scheduler.cancel(interval)
        await asyncio.sleep(0)
        return interval

    interval = asyncio.run(scenario())
    assert len(calls) >= 3
    assert "spawn failed" in caplog.text
    assert interval.done()


def test_simulation_runs_on_asyncio_until_collision():
    settings = EngineSettings(
        playfield_width=200.0,
        base_spawn_interval_ms=10,
        base_obstacle_speed=20.0,
        frame_rate=500.0,
    )

    async def scenario():
        sim = Simulation(settings=settings, scheduler=AsyncioScheduler(settings.frame_rate))
        sim.start()
        for _ in range(200):
            if sim.get_run_state() is RunState.ENDED:
                break
            await asyncio.sleep(0.01)
        return sim

    sim = asyncio.run(scenario())
    assert sim.get_run_state() is RunState.ENDED
    assert sim.current_step > 0
