"""
Cooperative scheduler on a virtual clock.

All timed behaviour (mission countdowns, narration display windows,
mission result display) is expressed as tasks on this clock. Nothing
runs until ``advance`` is called, so input handling between advances is
atomic. Cancelling a task takes effect immediately; a cancelled task
never fires again.
"""

import heapq
from typing import Callable, List, Optional, Tuple


class ScheduledTask:
    """Handle for a one-shot or repeating callback"""

    def __init__(self, due: float, callback: Callable[[], None],
                 interval: Optional[float] = None, name: str = ""):
        self.due = due
        self.callback = callback
        self.interval = interval
        self.name = name
        self._cancelled = False
        self._finished = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._finished)

    def cancel(self):
        self._cancelled = True

    def __repr__(self) -> str:
        kind = f"every {self.interval}s" if self.interval else "once"
        return f"ScheduledTask({self.name or '?'}, due={self.due}, {kind}, active={self.active})"


class Scheduler:
    """
    Deterministic single-threaded task scheduler.

    Tasks fire in (due time, scheduling order). Callbacks may schedule or
    cancel other tasks, including ones due within the same advance.
    """

    def __init__(self):
        self.now: float = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._seq = 0

    def _push(self, task: ScheduledTask):
        heapq.heappush(self._queue, (task.due, self._seq, task))
        self._seq += 1

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """Run ``callback`` once, ``delay`` seconds from now"""
        if delay < 0:
            raise ValueError("delay must be non-negative")
        task = ScheduledTask(self.now + delay, callback, name=name)
        self._push(task)
        return task

    def call_every(self, interval: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """Run ``callback`` every ``interval`` seconds, first after one interval"""
        if interval <= 0:
            raise ValueError("interval must be positive")
        task = ScheduledTask(self.now + interval, callback, interval=interval, name=name)
        self._push(task)
        return task

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every task that comes due.

        Args:
            seconds: Amount of virtual time to advance (>= 0)

        Returns:
            Number of callbacks fired
        """
        if seconds < 0:
            raise ValueError("cannot advance the clock backwards")

        target = self.now + seconds
        fired = 0

        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue

            self.now = due
            task.callback()
            fired += 1

            if task.interval is not None and not task.cancelled:
                task.due = due + task.interval
                self._push(task)
            else:
                task._finished = True

        self.now = target
        return fired

    def pending(self) -> List[ScheduledTask]:
        """Active tasks in firing order"""
        return [task for _, _, task in sorted(self._queue) if task.active]
