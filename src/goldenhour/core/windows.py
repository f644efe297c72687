from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from .daylight import SolarDataUnavailable
from .timebase import Timebase

GOLDEN_MARGIN = timedelta(minutes=30)
BLUE_MARGIN = timedelta(minutes=20)
# how far ahead next_event looks for a sunrise when days are polar
MAX_DAYS_AHEAD = 366


class LightingState(str, Enum):
  GOLDEN = "golden"
  BLUE = "blue"
  DAY = "day"


class EventKind(str, Enum):
  BLUE_MORNING = "Blue Hour (Morning)"
  GOLDEN_MORNING = "Golden Hour (Morning)"
  GOLDEN_EVENING = "Golden Hour (Evening)"
  BLUE_EVENING = "Blue Hour (Evening)"


@dataclass(frozen=True)
class Coordinate:
  latitude: float
  longitude: float

  def __post_init__(self):
    if not -90.0 <= self.latitude <= 90.0:
      raise ValueError(f"latitude out of range: {self.latitude}")
    if not -180.0 <= self.longitude <= 180.0:
      raise ValueError(f"longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class SolarInstants:
  day: date
  coordinate: Coordinate
  sunrise: datetime
  sunset: datetime


@dataclass(frozen=True)
class LightingWindow:
  name: str
  start: datetime
  end: datetime

  def contains(self, t: datetime) -> bool:
    # closed on both ends when classifying
    return self.start <= t <= self.end


@dataclass(frozen=True)
class UpcomingEvent:
  kind: EventKind
  at: datetime

  @property
  def label(self) -> str:
    return self.kind.value


@dataclass(frozen=True)
class DayWindows:
  instants: SolarInstants
  morning_blue: LightingWindow
  morning_golden: LightingWindow
  evening_golden: LightingWindow
  evening_blue: LightingWindow

  @property
  def day(self) -> date:
    return self.instants.day

  @property
  def sunrise(self) -> datetime:
    return self.instants.sunrise

  @property
  def sunset(self) -> datetime:
    return self.instants.sunset

  def events(self) -> list[UpcomingEvent]:
    """Window starts of interest, in chronological order.

    Near the polar circles the sunset reported for a local date can fall
    before that date's sunrise, so the list is sorted by instant.
    """
    events = [
      UpcomingEvent(EventKind.BLUE_MORNING, self.morning_blue.start),
      UpcomingEvent(EventKind.GOLDEN_MORNING, self.morning_golden.start),
      UpcomingEvent(EventKind.GOLDEN_EVENING, self.evening_golden.start),
      UpcomingEvent(EventKind.BLUE_EVENING, self.evening_blue.start),
    ]
    return sorted(events, key=lambda ev: ev.at)


def windows_from_instants(instants: SolarInstants) -> DayWindows:
  rise, set_ = instants.sunrise, instants.sunset
  return DayWindows(
    instants=instants,
    morning_blue=LightingWindow("morning-blue", rise - BLUE_MARGIN, rise),
    morning_golden=LightingWindow("morning-golden", rise, rise + GOLDEN_MARGIN),
    evening_golden=LightingWindow("evening-golden", set_ - GOLDEN_MARGIN, set_),
    evening_blue=LightingWindow("evening-blue", set_, set_ + BLUE_MARGIN),
  )


def compute_windows(day: date, coordinate: Coordinate, daylight) -> DayWindows:
  """Derive the four lighting windows for one date and position.

  `daylight` is any object with `sunrise_sunset(day, coordinate)`; it is
  called exactly once. SolarDataUnavailable from it is propagated.
  """
  sunrise, sunset = daylight.sunrise_sunset(day, coordinate)
  return windows_from_instants(SolarInstants(day, coordinate, sunrise, sunset))


def classify(now: datetime, windows: Optional[DayWindows]) -> LightingState:
  if windows is None:
    return LightingState.DAY
  if windows.morning_golden.contains(now) or windows.evening_golden.contains(now):
    return LightingState.GOLDEN
  if windows.morning_blue.contains(now) or windows.evening_blue.contains(now):
    return LightingState.BLUE
  return LightingState.DAY


def next_event(
  now: datetime,
  coordinate: Coordinate,
  windows: Optional[DayWindows],
  daylight,
  max_days_ahead: int = MAX_DAYS_AHEAD,
) -> Optional[UpcomingEvent]:
  """First window start strictly after `now`.

  Today's candidates come from `windows`; once they have all passed the
  provider is asked for the following dates until one has a sunrise.
  """
  if windows is not None:
    for ev in windows.events():
      if ev.at > now:
        return ev
    today = windows.day
  else:
    today = now.date()

  days = Timebase(today + timedelta(days=1)).days(max_days_ahead)
  for d in days:
    try:
      upcoming = compute_windows(d, coordinate, daylight)
    except SolarDataUnavailable:
      continue
    for ev in upcoming.events():
      if ev.at > now:
        return ev
  return None


def format_countdown(target: datetime, now: datetime) -> str:
  if target <= now:
    return "00:00:00"
  total = int((target - now).total_seconds())
  hours, rem = divmod(total, 3600)
  minutes, seconds = divmod(rem, 60)
  return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
