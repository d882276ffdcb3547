"""``build-tracker stats`` — show build statistics."""

from __future__ import annotations

import typer
from rich.console import Console

from buildtracker.cli.commands._context import fail, get_tracker
from buildtracker.core.errors import TrackerError
from buildtracker.display.renderer import HistoryRenderer

console = Console()


def stats_cmd(ctx: typer.Context) -> None:
    """Show totals, success rate, and average duration."""
    try:
        stats = get_tracker(ctx).get_stats()
    except TrackerError as exc:
        raise fail(console, "getting stats", exc)

    HistoryRenderer(console=console).print_stats(stats)
