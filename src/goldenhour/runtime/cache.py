"""Cache of lighting windows for the current (calendar date, coordinate)."""
from datetime import date, datetime
from threading import RLock
from typing import Dict, Optional, Tuple, Union
import logging

from ..core.daylight import SolarDataUnavailable
from ..core.windows import Coordinate, DayWindows, compute_windows

logger = logging.getLogger(__name__)

Key = Tuple[date, Coordinate]


class WindowCache:
    """Keeps the windows of one (date, coordinate) pair.

    A different date or coordinate replaces the entry, which covers both a
    new location fix and the calendar date rolling over at midnight.
    Next-day sunrise/sunset lookups made during rollover are memoized
    separately through sunrise_sunset().
    """

    def __init__(self, daylight):
        """Initialize cache.

        Args:
            daylight: Provider with sunrise_sunset(day, coordinate)
        """
        self.daylight = daylight
        self._lock = RLock()
        self._key: Optional[Key] = None
        self._windows: Optional[DayWindows] = None
        self._polar: Optional[str] = None
        self._instants: Dict[Key, Union[Tuple[datetime, datetime], SolarDataUnavailable]] = {}
        self._computations = 0

    def get(self, day: date, coordinate: Coordinate) -> Optional[DayWindows]:
        """Get the windows for a date and coordinate.

        Args:
            day: Local calendar date
            coordinate: Observer position

        Returns:
            DayWindows, or None when the sun does not rise or set that day
        """
        key = (day, coordinate)
        with self._lock:
            if key != self._key:
                self._recompute(key)
            return self._windows

    def polar_condition(self, day: date, coordinate: Coordinate) -> Optional[str]:
        """Polar condition for the pair, or None for an ordinary day."""
        with self._lock:
            self.get(day, coordinate)
            return self._polar

    def sunrise_sunset(self, day: date, coordinate: Coordinate) -> Tuple[datetime, datetime]:
        """Memoized pass-through to the provider, pruned on rollover."""
        key = (day, coordinate)
        with self._lock:
            if key not in self._instants:
                try:
                    self._instants[key] = self.daylight.sunrise_sunset(day, coordinate)
                except SolarDataUnavailable as e:
                    # polar days are looked up on every tick otherwise
                    self._instants[key] = e
            found = self._instants[key]
        if isinstance(found, SolarDataUnavailable):
            raise found
        return found

    def invalidate(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._key = None
            self._windows = None
            self._polar = None
            self._instants.clear()

    @property
    def computations(self) -> int:
        """Number of window recomputations so far."""
        with self._lock:
            return self._computations

    def _recompute(self, key: Key) -> None:
        day, coordinate = key
        # earlier dates and other coordinates are never asked for again
        self._instants = {
            k: v for k, v in self._instants.items() if k[1] == coordinate and k[0] >= day
        }
        self._computations += 1
        try:
            self._windows = compute_windows(day, coordinate, self)
            self._polar = None
            logger.info(
                f"Windows for {day.isoformat()}: sunrise {self._windows.sunrise.isoformat()}, "
                f"sunset {self._windows.sunset.isoformat()}"
            )
        except SolarDataUnavailable as e:
            self._windows = None
            self._polar = e.condition
            logger.info(f"No sunrise/sunset on {day.isoformat()}: {e.condition}")
        self._key = key
