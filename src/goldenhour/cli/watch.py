"""CLI command showing a live golden/blue hour countdown."""

from datetime import datetime
import asyncio
import logging
import os
import signal
import sys
import threading

import click

from ..app import GoldenHourApp
from ..config import load_config
from ..runtime import LocationUnavailable, SimulationClock
from .render import render_notice, render_snapshot


def apply_overrides(cfg, lat, lon, timezone):
    """Overlay command-line values on a loaded config."""
    updates = {}
    if lat is not None or lon is not None:
        location = cfg.location.model_dump()
        location.update(latitude=lat, longitude=lon)
        updates["location"] = location
    if timezone:
        updates["timezone"] = timezone
    if not updates:
        return cfg
    # re-validate so bad overrides fail like bad files
    return type(cfg)(**{**cfg.model_dump(), **updates})


def refresh_location(app):
    """Ask for a new location fix.

    Failures are already reported through the app's notices.

    Returns:
        True if a coordinate is available afterwards
    """
    try:
        asyncio.run(app.update_location())
    except LocationUnavailable:
        return False
    return True


def parse_start_time(value):
    if not value:
        return None
    start_dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if start_dt.tzinfo is None:
        raise ValueError("start time needs a UTC offset, e.g. 2025-06-21T04:00:00+02:00")
    return start_dt


@click.command()
@click.option("--config", type=click.Path(exists=True), help="Configuration file path")
@click.option("--lat", type=float, help="Latitude in degrees (overrides config)")
@click.option("--lon", type=float, help="Longitude in degrees (overrides config)")
@click.option("--timezone", type=str, help="Display timezone, e.g. Europe/Paris (default: system zone)")
@click.option("--start-time", type=str, help="Preview from this instant (ISO format with offset)")
@click.option("--speed", default=1.0, type=float, help="Time acceleration factor (default: 1.0 = real-time)")
@click.option("--once", is_flag=True, help="Print one snapshot and exit")
def main(config, lat, lon, timezone, start_time, speed, once):
    """Show the current lighting and count down to the next golden or blue hour.

    Examples:
        # Count down for a fixed position
        goldenhour-watch --lat 48.8566 --lon 2.3522

        # Preview a summer morning at 60x speed
        goldenhour-watch --lat 48.8566 --lon 2.3522 --start-time 2025-06-21T05:00:00+02:00 --speed 60
    """
    try:
        cfg = apply_overrides(load_config(config), lat, lon, timezone)
        start_dt = parse_start_time(start_time)
        clock = SimulationClock(start_time=start_dt, speed=speed)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    logging.basicConfig(
        level=getattr(logging, cfg.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = GoldenHourApp(cfg, clock=clock)
    color = sys.stdout.isatty()
    app.state.add_listener(lambda notice: click.echo(render_notice(notice, color=color)))

    if not refresh_location(app):
        sys.exit(1)

    if once:
        click.echo("\n".join(render_snapshot(app.snapshot(), color=color)))
        return

    def redraw(snap):
        click.clear()
        click.echo("\n".join(render_snapshot(snap, color=color)))
        click.echo()
        click.echo(hint)

    # SIGHUP asks for a new location fix, like an "Update Location" button
    refresh = threading.Event()
    hint = "Press Ctrl+C to stop..."
    if hasattr(signal, "SIGHUP"):
        signal.signal(signal.SIGHUP, lambda signum, frame: refresh.set())
        hint = f"Press Ctrl+C to stop, kill -HUP {os.getpid()} to update location..."

    app.add_listener(redraw)
    app.start()
    try:
        while app.is_running():
            if refresh.wait(0.5):
                refresh.clear()
                refresh_location(app)
    except KeyboardInterrupt:
        click.echo("\nStopping...")
    finally:
        app.stop()


if __name__ == "__main__":
    main()
