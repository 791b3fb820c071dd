"""
Cancellable deferred actions.

A Scheduler runs a callback once after a delay and hands back a ScheduledTask
that can be cancelled before it fires. Two implementations:

- ThreadingScheduler: wall-clock timers on daemon threads.
- ManualScheduler: a mock clock that only moves when advance() is called.
  Used by tests and demos to simulate minutes passing instantly.
"""

import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, UTC
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

TaskCallback = Callable[[], None]


class ScheduledTask:
    """Handle for a callback scheduled to run once."""

    def __init__(self, name: str, due: datetime, callback: TaskCallback) -> None:
        self.name = name
        self.due = due
        self._callback = callback
        self._lock = threading.Lock()
        self._cancelled = False
        self._started = False
        self._timer: Optional[threading.Timer] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def started(self) -> bool:
        return self._started

    def cancel(self) -> bool:
        """
        Cancel the task.

        Returns:
            True if the callback will not run because of this call, False if it
            had already started or was already cancelled.
        """
        with self._lock:
            if self._cancelled or self._started:
                return False
            self._cancelled = True
            timer = self._timer
        if timer is not None:
            timer.cancel()
        logger.debug(f"Cancelled task {self.name}")
        return True

    def run(self) -> None:
        """Run the callback unless the task was cancelled first."""
        with self._lock:
            if self._cancelled or self._started:
                return
            self._started = True
        self._callback()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "started" if self._started else "pending"
        return f"ScheduledTask({self.name!r}, due={self.due.isoformat()}, {state})"


class Scheduler(ABC):
    """Abstract source of deferred, cancellable callbacks."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time according to this scheduler."""
        pass

    @abstractmethod
    def schedule(self, delay: timedelta, callback: TaskCallback, name: str = "task") -> ScheduledTask:
        """
        Run callback once after delay.

        Args:
            delay: How long to wait before running
            callback: Zero-argument callable
            name: Label used in logs and thread names

        Returns:
            Handle that can cancel the callback before it runs
        """
        pass


class ThreadingScheduler(Scheduler):
    """Scheduler backed by daemon threading.Timer instances."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def schedule(self, delay: timedelta, callback: TaskCallback, name: str = "task") -> ScheduledTask:
        task = ScheduledTask(name, self.now() + delay, callback)

        timer = threading.Timer(delay.total_seconds(), task.run)
        timer.name = name
        timer.daemon = True
        task._timer = timer
        timer.start()

        logger.debug(f"Scheduled {name} in {delay.total_seconds():.3f}s")
        return task


class ManualScheduler(Scheduler):
    """
    Scheduler driven by a mock clock.

    Nothing fires until advance() moves the clock past a task's due time.
    Due tasks run in due-time order (ties in scheduling order), on the thread
    that called advance(), outside the scheduler's own lock.
    """

    def __init__(self, start: Optional[datetime] = None) -> None:
        self._now = start or datetime(2025, 1, 1, 9, 0, tzinfo=UTC)
        self._queue: List[tuple[datetime, int, ScheduledTask]] = []
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def schedule(self, delay: timedelta, callback: TaskCallback, name: str = "task") -> ScheduledTask:
        with self._lock:
            task = ScheduledTask(name, self._now + delay, callback)
            heapq.heappush(self._queue, (task.due, next(self._counter), task))
        logger.debug(f"Scheduled {name} at {task.due.isoformat()}")
        return task

    def pending(self) -> List[ScheduledTask]:
        """Tasks that have neither run nor been cancelled, in firing order."""
        with self._lock:
            entries = sorted(self._queue)
        return [task for _, _, task in entries if not task.cancelled and not task.started]

    def advance(self, delta: timedelta) -> int:
        """
        Move the clock forward and run every task that falls due.

        Args:
            delta: How far to move the clock

        Returns:
            Number of tasks that actually ran
        """
        with self._lock:
            target = self._now + delta

        fired = 0
        while True:
            with self._lock:
                if not self._queue or self._queue[0][0] > target:
                    self._now = max(self._now, target)
                    break
                due, _, task = heapq.heappop(self._queue)
                self._now = max(self._now, due)

            if task.cancelled:
                continue
            task.run()
            fired += 1

        return fired
