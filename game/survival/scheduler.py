"""
Timer primitives for the simulation loop
----------------------------------------
The session never talks to a real clock. It is handed a scheduler with:

- now() -> milliseconds
- schedule_periodic(interval_ms, callback) -> TimerHandle
- schedule_next_tick(callback)

FrameScheduler is a deterministic implementation: a virtual clock and a
single task queue. Every callback (periodic timers and frame callbacks)
runs from run_frame()/advance(), one after the other, so session state is
never touched by two callbacks at once. The arcade front end has its own
wall-clock implementation in window.py.
"""

from __future__ import annotations

import itertools
from typing import Callable, List, Optional

from .config import FRAME_MS


class TimerHandle:
    """Cancellable handle for a scheduled periodic callback"""

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None):
        self._active = True
        self._on_cancel = on_cancel

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self):
        """Stop the timer. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel()


class _PeriodicTimer(TimerHandle):
    def __init__(self, interval_ms: float, callback: Callable[[], None], due_ms: float, seq: int):
        super().__init__()
        self.interval_ms = interval_ms
        self.callback = callback
        self.due_ms = due_ms
        self.seq = seq


class FrameScheduler:
    """Virtual-clock scheduler driven one frame at a time"""

    def __init__(self, frame_ms: float = FRAME_MS, start_ms: float = 0.0):
        self.frame_ms = frame_ms
        self._now = start_ms
        self._timers: List[_PeriodicTimer] = []
        self._frame_callbacks: List[Callable[[], None]] = []
        self._seq = itertools.count()
        self.frames = 0

    # ----------------------------
    # Scheduler API
    # ----------------------------

    def now(self) -> float:
        return self._now

    def schedule_periodic(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")
        timer = _PeriodicTimer(interval_ms, callback, self._now + interval_ms, next(self._seq))
        self._timers.append(timer)
        return timer

    def schedule_next_tick(self, callback: Callable[[], None]):
        self._frame_callbacks.append(callback)

    # ----------------------------
    # Driving the clock
    # ----------------------------

    def advance(self, ms: float):
        """Move the clock forward, firing every periodic timer that falls due"""
        target = self._now + ms
        while True:
            due = [t for t in self._timers if t.active and t.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due_ms, t.seq))
            self._now = max(self._now, timer.due_ms)
            timer.due_ms += timer.interval_ms
            timer.callback()
        self._now = target
        self._timers = [t for t in self._timers if t.active]

    def run_frame(self):
        """Advance one frame, then run the callbacks queued for this frame"""
        self.advance(self.frame_ms)
        pending, self._frame_callbacks = self._frame_callbacks, []
        for callback in pending:
            callback()
        self.frames += 1

    def run_for(self, ms: float) -> int:
        """Run whole frames covering ``ms`` of game time; returns frames run"""
        n = int(round(ms / self.frame_ms))
        for _ in range(n):
            self.run_frame()
        return n

    @property
    def active_timers(self) -> int:
        return sum(1 for t in self._timers if t.active)

    @property
    def pending_frames(self) -> int:
        return len(self._frame_callbacks)
