"""Terminal report of one fusion run, rendered with rich."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from apfusion.config import FusionConfig
from apfusion.fusion.average import assumed_range
from apfusion.models import FusedLocation, PositionEstimate


def estimate_table(
    estimates: Sequence[PositionEstimate],
    survivors: Sequence[PositionEstimate],
    config: FusionConfig,
) -> Table:
    kept = {id(est) for est in survivors}
    table = Table(title="access points", expand=False)
    table.add_column("identifier")
    table.add_column("latitude", justify="right")
    table.add_column("longitude", justify="right")
    table.add_column("acc (m)", justify="right")
    table.add_column("dBm", justify="right")
    table.add_column("range (m)", justify="right")
    table.add_column("status")

    for est in sorted(estimates, key=lambda item: item.identifier):
        used = id(est) in kept
        table.add_row(
            est.identifier,
            f"{est.latitude:.6f}",
            f"{est.longitude:.6f}",
            f"{est.accuracy:.1f}",
            str(est.signal_level),
            f"{assumed_range(est, config.max_assumed_coverage):.1f}",
            Text("used", "green") if used else Text("culled", "red"),
            style=None if used else "dim",
        )
    return table


def location_panel(location: FusedLocation | None) -> Panel:
    text = Text()
    if location is None:
        text.append("no location", "bold red")
        text.append("  (fewer than 2 consistent access points)", "dim")
        return Panel(text, title="result")

    text.append(f"{location.latitude:.6f}, {location.longitude:.6f}", "bold white")
    if location.altitude is not None:
        text.append(f"  alt {location.altitude:.1f}m", "white")
    text.append(f"  ±{location.accuracy:.1f}m", "green")
    text.append(f"  from {location.sample_count} APs", "dim")
    return Panel(text, title=f"result ({location.source})")


def render(
    estimates: Sequence[PositionEstimate],
    survivors: Sequence[PositionEstimate],
    location: FusedLocation | None,
    config: FusionConfig,
    console: Console | None = None,
) -> None:
    console = console or Console()
    console.print(Group(estimate_table(estimates, survivors, config), location_panel(location)))
