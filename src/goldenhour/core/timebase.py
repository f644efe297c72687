from dataclasses import dataclass
from datetime import date, timedelta


@dataclass
class Timebase:
  start: date

  def days(self, count: int):
    d = self.start
    for _ in range(count):
      yield d
      d += timedelta(days=1)
