# runegather/core/scheduler.py
"""
Cooperative timer facility for the gathering engine.

Nothing here runs on its own thread: the game loop (or a test) advances the
clock with update(dt_ms) and every timer that became due fires inside that call.
Continuations receive a CancellationToken and must check it before acting;
cancelling a ScheduledTask is only a courtesy that keeps it from firing again.
"""
import heapq
import itertools
from typing import Callable, List, Optional, Tuple

from runegather.utils.logger import Logger


class CancellationToken:
    """One-way flag shared by every continuation of a single run."""

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ScheduledTask:
    def __init__(self, task_id: int, due_ms: int, callback: Callable[[], None],
                 interval_ms: Optional[int] = None, label: str = ""):
        self.task_id = task_id
        self.due_ms = due_ms
        self.callback = callback
        self.interval_ms = interval_ms
        self.label = label or getattr(callback, "__name__", "task")
        self.active = True
        self.fire_count = 0

    @property
    def is_periodic(self) -> bool:
        return self.interval_ms is not None

    def cancel(self) -> None:
        self.active = False

    def __repr__(self) -> str:
        kind = f"every {self.interval_ms}ms" if self.is_periodic else "once"
        return f"<ScheduledTask #{self.task_id} {self.label} due={self.due_ms} {kind} active={self.active}>"


class Scheduler:
    def __init__(self, start_ms: int = 0):
        self.now_ms = start_ms
        self._heap: List[Tuple[int, int, ScheduledTask]] = []
        self._sequence = itertools.count()
        self._ids = itertools.count(1)

    def call_later(self, delay_ms: int, callback: Callable[[], None], label: str = "") -> ScheduledTask:
        """Run callback once, delay_ms after the current clock value."""
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        task = ScheduledTask(next(self._ids), self.now_ms + delay_ms, callback, label=label)
        self._push(task)
        return task

    def call_every(self, interval_ms: int, callback: Callable[[], None], label: str = "") -> ScheduledTask:
        """Run callback every interval_ms, first time one interval from now."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        task = ScheduledTask(next(self._ids), self.now_ms + interval_ms, callback,
                             interval_ms=interval_ms, label=label)
        self._push(task)
        return task

    def update(self, dt_ms: int) -> int:
        """
        Advance the clock by dt_ms and fire everything that became due.

        Tasks fire in (due time, scheduling order). The clock is moved to each
        task's due time before its callback runs, so work scheduled from inside
        a callback is timed relative to the moment it was scheduled and still
        fires in this call when it falls inside the window.

        Returns:
            The number of callbacks fired.
        """
        if dt_ms < 0:
            raise ValueError("dt_ms must be >= 0")
        target = self.now_ms + dt_ms
        fired = 0

        while self._heap and self._heap[0][0] <= target:
            due, _, task = heapq.heappop(self._heap)
            if not task.active:
                continue

            self.now_ms = max(self.now_ms, due)
            if not task.is_periodic:
                task.active = False

            task.fire_count += 1
            fired += 1
            try:
                task.callback()
            except Exception as e:
                # The loop has to keep running; the failing task is dropped.
                Logger.error("Scheduler", f"Task {task.label} failed: {e}")
                task.active = False
                continue

            if task.is_periodic and task.active:
                task.due_ms = due + task.interval_ms
                self._push(task)

        self.now_ms = target
        return fired

    def pending_count(self) -> int:
        return sum(1 for _, _, task in self._heap if task.active)

    def clear(self) -> None:
        for _, _, task in self._heap:
            task.active = False
        self._heap.clear()

    def _push(self, task: ScheduledTask) -> None:
        heapq.heappush(self._heap, (task.due_ms, next(self._sequence), task))
