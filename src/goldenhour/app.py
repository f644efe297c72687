"""Presentation coordinator that ties clock, windows and location together."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional
import logging

from .config import AppConfig
from .core.daylight import Daylight
from .core.windows import (
    Coordinate,
    LightingState,
    UpcomingEvent,
    classify,
    format_countdown,
    next_event,
)
from .runtime import (
    FixOptions,
    LocationFixRequester,
    SimulationClock,
    StaticLocationProvider,
    TickLoop,
    UnsupportedLocationProvider,
    ViewState,
    WindowCache,
)

logger = logging.getLogger(__name__)

TICK_TASK_ID = "tick"


@dataclass(frozen=True)
class Snapshot:
    """Everything the screen shows on one tick."""
    now: datetime
    coordinate: Optional[Coordinate]
    loading: bool
    error: Optional[str]
    state: LightingState
    next_event: Optional[UpcomingEvent]
    countdown: Optional[str]
    sunrise: Optional[datetime]
    sunset: Optional[datetime]
    polar: Optional[str]


class GoldenHourApp:
    """Recomputes the lighting state and countdown against a clock."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        clock=None,
        daylight=None,
        location_provider=None,
    ):
        """Initialize the app.

        Args:
            config: Application configuration (default: AppConfig())
            clock: Clock to read time from (default: real-time SimulationClock)
            daylight: Sunrise/sunset provider (default: astral-backed Daylight)
            location_provider: Location source (default: configured coordinate, if any)
        """
        self.config = config or AppConfig()
        self.tz = self.config.tzinfo()
        self.clock = clock or SimulationClock()
        self.daylight = daylight or Daylight(tz=self.tz)

        if location_provider is None:
            configured = self.config.location.coordinate()
            if configured is not None:
                location_provider = StaticLocationProvider(configured)
            else:
                location_provider = UnsupportedLocationProvider()

        self.state = ViewState()
        self.cache = WindowCache(self.daylight)
        loc = self.config.location
        self.locator = LocationFixRequester(
            location_provider,
            self.state,
            self.clock,
            FixOptions(
                high_accuracy=loc.high_accuracy,
                timeout=loc.timeout_seconds,
                maximum_age=loc.maximum_age_seconds,
            ),
        )
        self.loop = TickLoop(self.clock)
        self._listeners: List[Callable[[Snapshot], None]] = []
        self._running = False

    async def update_location(self) -> Coordinate:
        """Request a location fix and switch the windows to it.

        Raises:
            LocationUnavailable: if no fix could be obtained
        """
        previous = self.state.coordinate
        coordinate = await self.locator.request()
        if coordinate != previous:
            self.cache.invalidate()
        return coordinate

    def local_now(self) -> datetime:
        """Current clock time in the display timezone."""
        return self.clock.now().astimezone(self.tz)

    def snapshot(self) -> Snapshot:
        """Evaluate the lighting state and countdown for the current instant."""
        now = self.local_now()
        coordinate = self.state.coordinate
        windows = None
        polar = None
        upcoming = None
        countdown = None

        if coordinate is not None:
            # today's local date in the key makes midnight a rollover
            windows = self.cache.get(now.date(), coordinate)
            polar = self.cache.polar_condition(now.date(), coordinate)
            upcoming = next_event(now, coordinate, windows, self.cache)
            if upcoming is not None:
                countdown = format_countdown(upcoming.at, now)

        return Snapshot(
            now=now,
            coordinate=coordinate,
            loading=self.state.loading,
            error=self.state.error,
            state=classify(now, windows),
            next_event=upcoming,
            countdown=countdown,
            sunrise=windows.sunrise if windows else None,
            sunset=windows.sunset if windows else None,
            polar=polar,
        )

    def add_listener(self, callback: Callable[[Snapshot], None]) -> None:
        """Add a snapshot listener called on every tick.

        Args:
            callback: Function called with each Snapshot
        """
        if callback not in self._listeners:
            self._listeners.append(callback)

    def tick(self) -> Snapshot:
        """Compute a snapshot and hand it to listeners."""
        snap = self.snapshot()
        for listener in self._listeners:
            listener(snap)
        return snap

    def start(self) -> None:
        """Start ticking in the background."""
        if self._running:
            logger.warning("App already running")
            return

        self.loop.schedule_interval(
            timedelta(seconds=self.config.tick_seconds),
            self.tick,
            task_id=TICK_TASK_ID,
            run_immediately=True,
        )
        self.loop.start()
        self._running = True
        logger.info("Countdown started")

    def stop(self) -> None:
        """Stop ticking."""
        if not self._running:
            return

        self.loop.stop()
        self.loop.cancel_task(TICK_TASK_ID)
        self._running = False
        logger.info("Countdown stopped")

    def is_running(self) -> bool:
        """Check if the app is ticking."""
        return self._running
