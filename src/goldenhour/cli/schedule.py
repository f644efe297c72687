import sys
from datetime import date, datetime

import click

from ..config import load_config
from ..core.daylight import POLAR_DAY, Daylight, SolarDataUnavailable
from ..core.windows import EventKind, compute_windows
from .watch import apply_overrides


@click.command()
@click.option("--config", type=click.Path(exists=True))
@click.option("--lat", type=float)
@click.option("--lon", type=float)
@click.option("--timezone", type=str)
@click.option("--date", "on_date", type=click.DateTime(formats=["%Y-%m-%d"]), help="Date (default: today)")
def main(config, lat, lon, timezone, on_date):
  try:
    cfg = apply_overrides(load_config(config), lat, lon, timezone)
  except ValueError as e:
    click.echo(f"ERROR: {e}", err=True)
    sys.exit(2)
  coordinate = cfg.location.coordinate()
  if coordinate is None:
    click.echo("ERROR: no location; pass --lat/--lon or set location in the config", err=True)
    sys.exit(1)
  tz = cfg.tzinfo()
  d: date = on_date.date() if on_date else datetime.now(tz).date()
  try:
    w = compute_windows(d, coordinate, Daylight(tz=tz))
  except SolarDataUnavailable as e:
    kind = "Midnight sun" if e.condition == POLAR_DAY else "Polar night"
    click.echo(f"{d.isoformat()}: {kind}, no sunrise or sunset")
    return
  click.echo(f"Schedule for {d.isoformat()} at {coordinate.latitude:.4f}, {coordinate.longitude:.4f}")
  click.echo(f"Sunrise  {w.sunrise:%H:%M}")
  click.echo(f"Sunset   {w.sunset:%H:%M}")
  rows = [
    (EventKind.BLUE_MORNING.value, w.morning_blue),
    (EventKind.GOLDEN_MORNING.value, w.morning_golden),
    (EventKind.GOLDEN_EVENING.value, w.evening_golden),
    (EventKind.BLUE_EVENING.value, w.evening_blue),
  ]
  width = max(len(k) for k, _ in rows)
  for name, win in rows:
    click.echo(f"{name.ljust(width)} | {win.start:%H:%M} - {win.end:%H:%M}")


if __name__ == "__main__":
  main()
