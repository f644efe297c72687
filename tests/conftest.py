from datetime import date, datetime, timezone

import pytest

from goldenhour.core.daylight import POLAR_NIGHT, SolarDataUnavailable
from goldenhour.core.windows import Coordinate


class FixedDaylight:
  """Sunrise 06:00 and sunset 18:00 UTC every day, except listed polar days."""

  def __init__(self, polar_days=()):
    self.polar_days = set(polar_days)
    self.calls = 0

  def sunrise_sunset(self, d: date, coordinate):
    self.calls += 1
    if d in self.polar_days:
      raise SolarDataUnavailable(d, coordinate, POLAR_NIGHT)
    return (
      datetime(d.year, d.month, d.day, 6, 0, tzinfo=timezone.utc),
      datetime(d.year, d.month, d.day, 18, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def daylight():
  return FixedDaylight()


@pytest.fixture
def coord():
  return Coordinate(10.0, 20.0)


@pytest.fixture
def day():
  return date(2025, 3, 20)


@pytest.fixture
def make_daylight():
  def _make(polar_days=()):
    return FixedDaylight(polar_days)
  return _make
