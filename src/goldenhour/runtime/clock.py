"""Clocks driving the countdown.

The presentation layer never reads wall-clock time directly; it asks a clock,
so previews can run from another instant and tests can inject synthetic time.
"""
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Optional
import time


class SimulationClock:
    """Wall clock that can start at another instant and run faster."""

    def __init__(
        self,
        start_time: Optional[datetime] = None,
        speed: float = 1.0,
    ):
        """Initialize clock.

        Args:
            start_time: Instant the clock reads right now (default: current UTC time)
            speed: Time acceleration factor (1.0 = real-time, 60.0 = a minute per second)
        """
        if speed <= 0:
            raise ValueError("Speed must be positive")
        if start_time is not None and start_time.tzinfo is None:
            raise ValueError("start_time must be timezone-aware")

        self._lock = RLock()
        self._start_time = (start_time or datetime.now(timezone.utc)).astimezone(timezone.utc)
        self._wall_start = time.time()
        self._speed = speed

    def now(self) -> datetime:
        """Get current clock time as an aware UTC datetime."""
        with self._lock:
            wall_elapsed = time.time() - self._wall_start
            return self._start_time + timedelta(seconds=wall_elapsed * self._speed)

    def get_speed(self) -> float:
        """Get current time acceleration factor."""
        with self._lock:
            return self._speed

    def wall_time_until(self, target: datetime) -> Optional[float]:
        """Calculate wall clock seconds until a target clock time.

        Args:
            target: Target datetime

        Returns:
            Real seconds until target, or None if target is in the past
        """
        current = self.now()
        if target <= current:
            return None
        return (target - current).total_seconds() / self._speed

    def __repr__(self) -> str:
        return f"SimulationClock({self.now().isoformat()}, {self._speed}x)"


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start_time: datetime):
        if start_time.tzinfo is None:
            raise ValueError("start_time must be timezone-aware")
        self._lock = RLock()
        self._now = start_time.astimezone(timezone.utc)

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set_time(self, new_time: datetime) -> None:
        """Jump to a specific instant.

        Args:
            new_time: The aware datetime to jump to
        """
        with self._lock:
            self._now = new_time.astimezone(timezone.utc)

    def advance(self, delta: timedelta) -> None:
        """Advance the clock by a fixed amount.

        Args:
            delta: Amount of time to advance
        """
        with self._lock:
            self._now = self._now + delta

    def wall_time_until(self, target: datetime) -> Optional[float]:
        # nothing happens until the clock is advanced
        return None

    def __repr__(self) -> str:
        return f"ManualClock({self.now().isoformat()})"
