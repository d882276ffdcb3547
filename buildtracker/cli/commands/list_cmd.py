"""``build-tracker list`` — show the most recent builds."""

from __future__ import annotations

import typer
from rich.console import Console

from buildtracker.cli.commands._context import fail, get_tracker
from buildtracker.core.errors import TrackerError
from buildtracker.display.renderer import HistoryRenderer

console = Console()


def list_cmd(
    ctx: typer.Context,
    limit: int = typer.Option(
        None,
        "--limit",
        "-l",
        min=0,
        help="Number of builds to show (default 20).",
    ),
) -> None:
    """List recent builds, newest first."""
    try:
        builds = get_tracker(ctx).list_builds(limit)
    except TrackerError as exc:
        raise fail(console, "listing builds", exc)

    HistoryRenderer(console=console).print_builds(builds)
