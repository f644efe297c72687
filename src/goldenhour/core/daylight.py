from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo

from astral import Observer
from astral.sun import elevation, noon, sunrise, sunset

POLAR_DAY = "polar_day"
POLAR_NIGHT = "polar_night"


class SolarDataUnavailable(ValueError):
  """Sunrise or sunset does not happen on this date at this position."""

  def __init__(self, day: date, coordinate, condition: str):
    super().__init__(f"no sunrise/sunset on {day.isoformat()} at {coordinate}: {condition}")
    self.day = day
    self.coordinate = coordinate
    self.condition = condition


@dataclass
class Daylight:
  tz: tzinfo = timezone.utc

  def sunrise_sunset(self, d: date, coordinate) -> tuple[datetime, datetime]:
    observer = Observer(latitude=coordinate.latitude, longitude=coordinate.longitude)
    try:
      rise = sunrise(observer, date=d, tzinfo=self.tz)
      set_ = sunset(observer, date=d, tzinfo=self.tz)
    except ValueError as e:
      raise SolarDataUnavailable(d, coordinate, self.polar_condition(observer, d)) from e
    return rise, set_

  def polar_condition(self, observer: Observer, d: date) -> str:
    # astral raises for the whole day, so look at the sun at solar noon
    at_noon = noon(observer, date=d, tzinfo=self.tz)
    return POLAR_DAY if elevation(observer, at_noon) > 0 else POLAR_NIGHT
