"""
Tick and timer sources for the engine.

The engine only needs three operations: request a callback on the next frame,
run a callback periodically, and cancel either. ``ManualScheduler`` drives them
by hand (tests, headless stepping); ``AsyncioScheduler`` drives them from the
running asyncio loop.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class Scheduler(Protocol):
    def schedule_tick(self, callback: Callback) -> Any:
        """Run ``callback`` once, on the next frame."""

    def schedule_interval(self, callback: Callback, ms: float) -> Any:
        """Run ``callback`` every ``ms`` milliseconds until cancelled."""

    def cancel(self, handle: Any) -> None:
        """Cancel a handle; unknown, fired or already cancelled handles are ignored."""


@dataclass
class _Interval:
    callback: Callback
    period_ms: float
    due_ms: float
    order: int = field(default=0)


class ManualScheduler:
    """
    Deterministic scheduler driven by the caller.

    Frames and time are independent: ``run_frame`` runs the tick callbacks
    requested so far (callbacks requested while a frame runs wait for the next
    one), ``advance`` moves the virtual clock and fires due interval callbacks.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._frame_callbacks: Dict[int, Callback] = {}
        self._intervals: Dict[int, _Interval] = {}
        self.now_ms: float = 0.0
        self.frame: int = 0

    @property
    def pending_ticks(self) -> int:
        return len(self._frame_callbacks)

    @property
    def active_intervals(self) -> int:
        return len(self._intervals)

    def interval_periods(self) -> List[float]:
        return [interval.period_ms for interval in self._intervals.values()]

    def schedule_tick(self, callback: Callback) -> int:
        handle = next(self._ids)
        self._frame_callbacks[handle] = callback
        return handle

    def schedule_interval(self, callback: Callback, ms: float) -> int:
        if ms <= 0:
            raise ValueError(f"Interval must be positive, got {ms}")
        handle = next(self._ids)
        self._intervals[handle] = _Interval(callback, ms, self.now_ms + ms, order=handle)
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        self._frame_callbacks.pop(handle, None)
        self._intervals.pop(handle, None)

    def run_frame(self) -> int:
        """Run one frame; returns how many tick callbacks ran."""
        self.frame += 1
        batch = list(self._frame_callbacks.items())
        ran = 0
        for handle, callback in batch:
            # An earlier callback in this frame may have cancelled this one
            if self._frame_callbacks.pop(handle, None) is None:
                continue
            callback()
            ran += 1
        return ran

    def run_frames(self, count: int) -> int:
        return sum(self.run_frame() for _ in range(count))

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms``; returns how many interval callbacks fired."""
        target = self.now_ms + ms
        fired = 0
        while True:
            due = [
                (interval.due_ms, interval.order, handle)
                for handle, interval in self._intervals.items()
                if interval.due_ms <= target
            ]
            if not due:
                break
            due_ms, _, handle = min(due)
            interval = self._intervals[handle]
            self.now_ms = due_ms
            interval.due_ms += interval.period_ms
            interval.callback()
            fired += 1
        self.now_ms = target
        return fired


class AsyncioScheduler:
    """
    Real-time scheduler on the running asyncio loop.

    Ticks are one-shot ``call_later`` callbacks at ``1 / frame_rate`` seconds;
    intervals are tasks that sleep between calls.
    """

    def __init__(self, frame_rate: float = 60.0) -> None:
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        self.dt = 1.0 / frame_rate

    def schedule_tick(self, callback: Callback) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(self.dt, callback)

    def schedule_interval(self, callback: Callback, ms: float) -> asyncio.Task:
        if ms <= 0:
            raise ValueError(f"Interval must be positive, got {ms}")
        return asyncio.get_running_loop().create_task(self._interval_loop(callback, ms / 1000.0))

    def cancel(self, handle: Optional[asyncio.TimerHandle | asyncio.Task]) -> None:
        if handle is None:
            return
        handle.cancel()

    async def _interval_loop(self, callback: Callback, period: float) -> None:
        try:
            while True:
                await asyncio.sleep(period)
                try:
                    callback()
                except Exception as e:
                    logger.error(f"Error in interval callback: {e}")
        except asyncio.CancelledError:
            pass
