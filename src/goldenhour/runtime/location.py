"""Location fix requests.

A fix is requested at most once at a time. Callers arriving while a request
is outstanding wait on the same request, and a failure is reported to the
view state exactly once no matter how many callers are waiting.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import asyncio
import logging

from ..core.windows import Coordinate
from .state import ViewState

logger = logging.getLogger(__name__)


class LocationUnavailable(RuntimeError):
    """Permission denied, timeout, or no way to obtain a position."""


@dataclass(frozen=True)
class FixOptions:
    """Hints passed to the location provider."""
    high_accuracy: bool = True
    timeout: float = 10.0
    maximum_age: float = 300.0


class StaticLocationProvider:
    """Always reports a configured position."""

    def __init__(self, coordinate: Coordinate):
        self.coordinate = coordinate

    async def get_position(self, options: FixOptions) -> Coordinate:
        return self.coordinate


class UnsupportedLocationProvider:
    """Stands in when no position source is configured."""

    async def get_position(self, options: FixOptions) -> Coordinate:
        raise LocationUnavailable("Geolocation is not supported: no position source configured")


class LocationFixRequester:
    """Single-flight location requests with a bounded wait and fix reuse."""

    def __init__(
        self,
        provider,
        state: ViewState,
        clock,
        options: Optional[FixOptions] = None,
    ):
        """Initialize requester.

        Args:
            provider: Object with an async get_position(options) method
            state: View state receiving the coordinate, loading flag and errors
            clock: Clock used to age the last fix
            options: Request hints (default: high accuracy, 10s timeout, 5min max age)
        """
        self.provider = provider
        self.state = state
        self.clock = clock
        self.options = options or FixOptions()
        self._pending: Optional[asyncio.Future] = None
        self._last_fix: Optional[Coordinate] = None
        self._last_fix_at: Optional[datetime] = None
        self._provider_calls = 0

    @property
    def provider_calls(self) -> int:
        """Number of times the provider was actually asked."""
        return self._provider_calls

    async def request(self) -> Coordinate:
        """Get a location fix.

        Returns:
            The coordinate of the fix

        Raises:
            LocationUnavailable: if the fix failed; no retry is attempted
        """
        cached = self._fresh_fix()
        if cached is not None:
            self.state.set_coordinate(cached)
            return cached

        if self._pending is None or self._pending.done():
            self._pending = asyncio.ensure_future(self._acquire())
        return await asyncio.shield(self._pending)

    def _fresh_fix(self) -> Optional[Coordinate]:
        if self._last_fix is None or self._last_fix_at is None:
            return None
        age = self.clock.now() - self._last_fix_at
        if age <= timedelta(seconds=self.options.maximum_age):
            logger.debug(f"Reusing location fix from {age.total_seconds():.0f}s ago")
            return self._last_fix
        return None

    async def _acquire(self) -> Coordinate:
        self.state.begin_loading()
        self._provider_calls += 1
        try:
            coordinate = await asyncio.wait_for(
                self.provider.get_position(self.options),
                timeout=self.options.timeout,
            )
        except asyncio.TimeoutError:
            reason = f"Location request timed out after {self.options.timeout:g}s"
            self.state.fail(reason)
            raise LocationUnavailable(reason) from None
        except LocationUnavailable as e:
            self.state.fail(str(e))
            raise
        except Exception as e:
            # any provider failure is reported as the one location error
            reason = str(e) or type(e).__name__
            self.state.fail(reason)
            raise LocationUnavailable(reason) from e
        finally:
            self.state.end_loading()

        self._last_fix = coordinate
        self._last_fix_at = self.clock.now()
        self.state.set_coordinate(coordinate)
        return coordinate
