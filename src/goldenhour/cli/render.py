"""Turn snapshots into terminal text."""

from datetime import datetime
from typing import List

import click

from ..app import Snapshot
from ..core.daylight import POLAR_DAY
from ..core.windows import LightingState
from ..runtime.state import Notice

STATE_LABELS = {
    LightingState.GOLDEN: ("☀ Golden Hour", "yellow"),
    LightingState.BLUE: ("☾ Blue Hour", "blue"),
    LightingState.DAY: ("Daylight", "white"),
}


def _hm(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def render_snapshot(snap: Snapshot, color: bool = True) -> List[str]:
    """Render one snapshot as screen lines.

    Args:
        snap: The snapshot to show
        color: Whether to add ANSI styling

    Returns:
        Lines without trailing newlines
    """
    def style(text: str, **kwargs) -> str:
        return click.style(text, **kwargs) if color else text

    lines = [style("Golden Hour", bold=True), "Perfect light awaits", ""]

    if snap.coordinate is None:
        if snap.loading:
            lines.append("Getting Location...")
        else:
            lines.append("Enable location to see your golden and blue hour times")
        if snap.error:
            lines.append(style(f"Location Error: {snap.error}", fg="red"))
        return lines

    label, fg = STATE_LABELS[snap.state]
    lines.append(snap.now.strftime("%H:%M:%S"))
    lines.append(style(label, fg=fg))
    lines.append("")

    if snap.next_event is not None:
        lines.append(f"NEXT {snap.next_event.label.upper()}")
        lines.append(style(snap.countdown or "00:00:00", bold=True))
        lines.append(f"at {_hm(snap.next_event.at.astimezone(snap.now.tzinfo))}")
        lines.append("")

    lines.append("Today's Schedule")
    if snap.sunrise is not None and snap.sunset is not None:
        lines.append(f"  Sunrise  {_hm(snap.sunrise)}")
        lines.append(f"  Sunset   {_hm(snap.sunset)}")
    elif snap.polar is not None:
        lines.append("  Midnight sun" if snap.polar == POLAR_DAY else "  Polar night")

    lines.append("")
    lines.append(f"Location {snap.coordinate.latitude:.4f}, {snap.coordinate.longitude:.4f}")
    return lines


def render_notice(notice: Notice, color: bool = True) -> str:
    """Render a notice as a single line."""
    text = f"{notice.title} {notice.description}"
    if not color:
        return text
    return click.style(text, fg="red" if notice.destructive else "green")
