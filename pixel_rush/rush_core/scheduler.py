"""
Scheduler
=========

Single-threaded virtual-time scheduler driving the game loop.

The driver (pygame window, gym env, or a test) owns the clock: it calls
advance() with elapsed milliseconds, which fires due timers, then
run_frame() once per display refresh. Nothing here blocks or spawns threads.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """Cancellable handle for a scheduled callback."""

    __slots__ = ("_callback", "_interval", "_cancelled", "deadline")

    def __init__(
        self,
        callback: Callable[[], None],
        deadline: float,
        interval: Optional[float] = None
    ):
        self._callback = callback
        self._interval = interval
        self._cancelled = False
        self.deadline = deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self._interval is not None

    @property
    def interval(self) -> Optional[float]:
        return self._interval

    def cancel(self) -> None:
        """Prevent any further invocation. Safe to call twice."""
        self._cancelled = True

    def _run(self) -> None:
        self._callback()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else f"due@{self.deadline:.1f}"
        kind = f"every {self._interval}ms" if self._interval is not None else "once"
        return f"TimerHandle({kind}, {state})"


class Scheduler:
    """
    Virtual-time timers plus a per-frame callback queue.

    - call_later: one-shot timer
    - call_repeating: periodic timer, re-armed from its own deadline
    - request_frame: callback for the next run_frame()
    """

    def __init__(self, start_ms: float = 0.0):
        self._now: float = start_ms
        self._timers: List[Tuple[float, int, TimerHandle]] = []
        self._frame_callbacks: List[TimerHandle] = []
        self._sequence = itertools.count()

    @property
    def now(self) -> float:
        """Current virtual time in milliseconds."""
        return self._now

    @property
    def pending_timers(self) -> int:
        """Number of live (non-cancelled) timers."""
        return sum(1 for _, _, handle in self._timers if not handle.cancelled)

    @property
    def pending_frames(self) -> int:
        """Number of live frame callbacks waiting for run_frame()."""
        return sum(1 for handle in self._frame_callbacks if not handle.cancelled)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Run callback once after delay_ms.

        Raises:
            ValueError: If delay_ms is negative.
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        handle = TimerHandle(callback, self._now + delay_ms)
        self._push(handle)
        return handle

    def call_repeating(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Run callback every interval_ms, first call one interval from now.

        Raises:
            ValueError: If interval_ms is not positive.
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        handle = TimerHandle(callback, self._now + interval_ms, interval=interval_ms)
        self._push(handle)
        return handle

    def request_frame(self, callback: Callable[[], None]) -> TimerHandle:
        """Run callback on the next run_frame()."""
        handle = TimerHandle(callback, self._now)
        self._frame_callbacks.append(handle)
        return handle

    def advance(self, dt_ms: float) -> int:
        """
        Move virtual time forward, firing due timers in deadline order.

        Args:
            dt_ms: Milliseconds to advance.

        Returns:
            Number of callbacks fired.

        Raises:
            ValueError: If dt_ms is negative.
        """
        if dt_ms < 0:
            raise ValueError(f"dt_ms must be >= 0, got {dt_ms}")
        target = self._now + dt_ms
        fired = 0

        while self._timers and self._timers[0][0] <= target:
            deadline, _, handle = heapq.heappop(self._timers)
            if handle.cancelled:
                continue
            self._now = deadline
            if handle.repeating:
                handle.deadline = deadline + handle.interval
                self._push(handle)
            handle._run()
            fired += 1

        self._now = target
        return fired

    def run_frame(self) -> int:
        """
        Fire callbacks requested before this call.

        Callbacks requested while the frame runs wait for the next frame.

        Returns:
            Number of callbacks fired.
        """
        callbacks, self._frame_callbacks = self._frame_callbacks, []
        fired = 0
        for handle in callbacks:
            if handle.cancelled:
                continue
            handle.cancel()
            handle._run()
            fired += 1
        return fired

    def cancel_all(self) -> None:
        """Cancel every timer and frame callback."""
        for _, _, handle in self._timers:
            handle.cancel()
        for handle in self._frame_callbacks:
            handle.cancel()
        self._timers.clear()
        self._frame_callbacks.clear()

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._timers, (handle.deadline, next(self._sequence), handle))
