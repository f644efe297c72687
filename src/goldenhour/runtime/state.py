"""View state shared by the tick thread and the location request.

Holds the current coordinate, the loading flag and the last error, and fans
out user-facing notices to listeners.
"""
from dataclasses import dataclass
from threading import RLock
from typing import Callable, List, Optional
import logging

from ..core.windows import Coordinate

logger = logging.getLogger(__name__)

LOCATION_FOUND = "Location found!"
LOCATION_FOUND_DETAIL = "Golden and blue hour times updated for your location."
LOCATION_ERROR = "Location Error"
LOCATION_ERROR_DETAIL = "Unable to get your location. Please check your location settings."


@dataclass(frozen=True)
class Notice:
    """A short user-facing notification."""
    title: str
    description: str
    destructive: bool = False


class ViewState:
    """Thread-safe state for the presentation layer."""

    def __init__(self):
        self._lock = RLock()
        self._coordinate: Optional[Coordinate] = None
        self._loading = False
        self._error: Optional[str] = None
        self._listeners: List[Callable[[Notice], None]] = []

    @property
    def coordinate(self) -> Optional[Coordinate]:
        with self._lock:
            return self._coordinate

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    def begin_loading(self) -> bool:
        """Enter the loading state.

        Returns:
            False if a request is already outstanding
        """
        with self._lock:
            if self._loading:
                return False
            self._loading = True
            return True

    def end_loading(self) -> None:
        with self._lock:
            self._loading = False

    def set_coordinate(self, coordinate: Coordinate) -> None:
        """Record a new location fix and clear any previous error.

        Args:
            coordinate: The new position
        """
        with self._lock:
            self._coordinate = coordinate
            self._error = None
        logger.info(f"Location set to {coordinate.latitude:.4f}, {coordinate.longitude:.4f}")
        self._notify(Notice(LOCATION_FOUND, LOCATION_FOUND_DETAIL))

    def fail(self, reason: str) -> None:
        """Record a location failure and leave the loading state.

        Args:
            reason: Technical reason, kept for logs and the snapshot
        """
        with self._lock:
            self._error = reason
            self._loading = False
        logger.error(f"Error getting location: {reason}")
        self._notify(Notice(LOCATION_ERROR, LOCATION_ERROR_DETAIL, destructive=True))

    def add_listener(self, callback: Callable[[Notice], None]) -> None:
        """Add a notice listener.

        Args:
            callback: Function called with each Notice
        """
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[Notice], None]) -> bool:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)
                return True
            return False

    def _notify(self, notice: Notice) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(notice)
            except Exception as e:
                # Log but don't fail on listener errors
                logger.error(f"Error in notice listener: {e}")
