"""Runtime components for the golden hour countdown."""

from .clock import SimulationClock, ManualClock
from .loop import TickLoop, ScheduledTask
from .cache import WindowCache
from .state import ViewState, Notice
from .location import (
    FixOptions,
    LocationFixRequester,
    LocationUnavailable,
    StaticLocationProvider,
    UnsupportedLocationProvider,
)

__all__ = [
    "SimulationClock",
    "ManualClock",
    "TickLoop",
    "ScheduledTask",
    "WindowCache",
    "ViewState",
    "Notice",
    "FixOptions",
    "LocationFixRequester",
    "LocationUnavailable",
    "StaticLocationProvider",
    "UnsupportedLocationProvider",
]
