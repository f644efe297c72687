"""Tick loop for periodic recomputation.

Runs interval tasks against a clock, normally a once-per-second tick that
re-evaluates the lighting state and countdown.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional
import heapq
from threading import Thread, Event
import logging

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    """A callback due at run_at, repeating every `every`; task_id None means cancelled."""
    run_at: datetime
    callback: Callable[[], None]
    every: timedelta
    task_id: Optional[str] = None

    def __lt__(self, other):
        return self.run_at < other.run_at


class TickLoop:
    """Runs interval tasks against a clock, optionally in a background thread."""

    def __init__(self, clock):
        """Initialize tick loop.

        Args:
            clock: Any clock exposing now() and wall_time_until()
        """
        self.clock = clock
        self._tasks: List[ScheduledTask] = []
        self._due: List[ScheduledTask] = []
        self._running = False
        self._stop_event = Event()
        self._thread: Optional[Thread] = None
        self._task_counter = 0

    def schedule_interval(
        self,
        interval: timedelta,
        callback: Callable[[], None],
        task_id: Optional[str] = None,
        run_immediately: bool = False,
    ) -> str:
        """Run a callback every `interval` of clock time.

        Args:
            interval: Clock time between runs
            callback: Function to call, without arguments
            task_id: Optional task identifier
            run_immediately: If True, the first run is due now instead of after one interval

        Returns:
            Task ID
        """
        if interval <= timedelta(0):
            raise ValueError("interval must be positive")
        if task_id is None:
            self._task_counter += 1
            task_id = f"task_{self._task_counter}"

        first = self.clock.now() + (timedelta(0) if run_immediately else interval)
        heapq.heappush(self._tasks, ScheduledTask(first, callback, interval, task_id))
        return task_id

    def cancel_task(self, task_id: str) -> bool:
        """Cancel a task, including one whose callback is running right now.

        Returns:
            False if no task has that ID
        """
        for task in self._tasks + self._due:
            if task.task_id == task_id:
                task.task_id = None
                return True
        return False

    def run_pending(self) -> int:
        """Run every task that is due at the clock's current time.

        Returns:
            Number of callbacks executed
        """
        now = self.clock.now()
        executed = 0
        self._due = []
        while self._tasks and self._tasks[0].run_at <= now:
            self._due.append(heapq.heappop(self._tasks))

        for task in self._due:
            if task.task_id is None:
                continue
            try:
                task.callback()
                executed += 1
            except Exception as e:
                logger.error(f"Error executing task {task.task_id}: {e}")
            if task.task_id is not None:
                task.run_at = now + task.every
                heapq.heappush(self._tasks, task)

        self._due = []
        return executed

    def start(self) -> None:
        """Run due tasks from a daemon thread until stop()."""
        if self._running:
            logger.warning("Tick loop already running")
            return

        self._running = True
        self._stop_event.clear()
        self._thread = Thread(target=self._run_loop, daemon=True)
        self._thread.start()
        logger.info("Tick loop started")

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the thread and wait up to `timeout` seconds for it."""
        if not self._running:
            return

        self._running = False
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("Tick loop stopped")

    def _run_loop(self) -> None:
        while self._running and not self._stop_event.is_set():
            try:
                self.run_pending()
            except Exception as e:
                logger.error(f"Error in tick loop: {e}")

            # wake for the next due task, never sleeping past a second
            wait = 0.1
            if self._tasks:
                wait = min(self.clock.wall_time_until(self._tasks[0].run_at) or 0.05, 1.0)
            self._stop_event.wait(wait)

    def get_pending_tasks(self) -> int:
        """Count tasks that are scheduled and not cancelled."""
        return len([t for t in self._tasks if t.task_id is not None])

    def is_running(self) -> bool:
        return self._running
