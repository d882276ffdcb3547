"""``build-tracker report`` — statistics plus the latest builds."""

from __future__ import annotations

import typer
from rich.console import Console

from buildtracker.cli.commands._context import fail, get_tracker
from buildtracker.core.errors import TrackerError
from buildtracker.display.renderer import HistoryRenderer

console = Console()


def report_cmd(ctx: typer.Context) -> None:
    """Generate a summary report."""
    try:
        report = get_tracker(ctx).generate_report()
    except TrackerError as exc:
        raise fail(console, "generating report", exc)

    HistoryRenderer(console=console).print_report(report)
