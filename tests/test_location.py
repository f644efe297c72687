import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from goldenhour.core.windows import Coordinate
from goldenhour.runtime.clock import ManualClock
from goldenhour.runtime.location import (
  FixOptions,
  LocationFixRequester,
  LocationUnavailable,
  StaticLocationProvider,
  UnsupportedLocationProvider,
)
from goldenhour.runtime.state import LOCATION_ERROR, LOCATION_FOUND, ViewState

HERE = Coordinate(51.5, -0.12)


class SlowProvider:
  def __init__(self, delay, result=HERE, error=None, state=None):
    self.delay = delay
    self.result = result
    self.error = error
    self.state = state
    self.seen_loading = None
    self.seen_options = None

  async def get_position(self, options):
    self.seen_options = options
    if self.state is not None:
      self.seen_loading = self.state.loading
    await asyncio.sleep(self.delay)
    if self.error is not None:
      raise self.error
    return self.result


def make(provider, **opts):
  state = ViewState()
  notices = []
  state.add_listener(notices.append)
  clock = ManualClock(datetime(2025, 1, 1, 12, tzinfo=timezone.utc))
  req = LocationFixRequester(provider, state, clock, FixOptions(**opts))
  return req, state, notices, clock


def test_fix_sets_coordinate():
  provider = SlowProvider(0)
  req, state, notices, _ = make(provider)
  provider.state = state
  assert asyncio.run(req.request()) == HERE
  assert state.coordinate == HERE
  assert provider.seen_loading is True
  assert state.loading is False
  assert [n.title for n in notices] == [LOCATION_FOUND]


def test_default_options():
  provider = SlowProvider(0)
  req, _, _, _ = make(provider)
  asyncio.run(req.request())
  assert provider.seen_options == FixOptions(high_accuracy=True, timeout=10.0, maximum_age=300.0)


def test_timeout_reports_once():
  req, state, notices, _ = make(SlowProvider(3600), timeout=0.05)
  with pytest.raises(LocationUnavailable):
    asyncio.run(req.request())
  assert state.loading is False
  assert "timed out" in state.error
  assert [n.title for n in notices] == [LOCATION_ERROR]
  assert notices[0].destructive


def test_concurrent_requests_are_coalesced():
  req, _, _, _ = make(SlowProvider(0.01))

  async def both():
    return await asyncio.gather(req.request(), req.request())

  assert asyncio.run(both()) == [HERE, HERE]
  assert req.provider_calls == 1


def test_coalesced_failure_reported_once():
  req, state, notices, _ = make(SlowProvider(0.01, error=LocationUnavailable("denied")))

  async def both():
    return await asyncio.gather(req.request(), req.request(), return_exceptions=True)

  results = asyncio.run(both())
  assert all(isinstance(r, LocationUnavailable) for r in results)
  assert req.provider_calls == 1
  assert len(notices) == 1
  assert state.error == "denied"


def test_recent_fix_is_reused():
  req, _, _, clock = make(SlowProvider(0))
  asyncio.run(req.request())
  clock.advance(timedelta(minutes=4))
  asyncio.run(req.request())
  assert req.provider_calls == 1
  clock.advance(timedelta(minutes=2))
  asyncio.run(req.request())
  assert req.provider_calls == 2


def test_permission_error_maps_to_unavailable():
  req, state, _, _ = make(SlowProvider(0, error=PermissionError("User denied Geolocation")))
  with pytest.raises(LocationUnavailable):
    asyncio.run(req.request())
  assert state.error == "User denied Geolocation"


def test_unexpected_provider_error_maps_to_unavailable():
  req, state, notices, _ = make(SlowProvider(0, error=RuntimeError("gps daemon crashed")))
  with pytest.raises(LocationUnavailable):
    asyncio.run(req.request())
  assert state.error == "gps daemon crashed"
  assert state.loading is False
  assert [n.title for n in notices] == [LOCATION_ERROR]


def test_unsupported_provider():
  req, state, notices, _ = make(UnsupportedLocationProvider())
  with pytest.raises(LocationUnavailable):
    asyncio.run(req.request())
  assert state.coordinate is None
  assert len(notices) == 1


def test_failure_is_not_retried():
  provider = SlowProvider(0, error=LocationUnavailable("denied"))
  req, _, _, _ = make(provider)
  with pytest.raises(LocationUnavailable):
    asyncio.run(req.request())
  assert req.provider_calls == 1


def test_static_provider():
  req, state, _, _ = make(StaticLocationProvider(HERE))
  asyncio.run(req.request())
  assert state.coordinate == HERE
