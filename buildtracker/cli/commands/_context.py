"""Shared plumbing for CLI commands."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from buildtracker.config import TrackerConfig
from buildtracker.core.tracker import BuildTracker


def get_tracker(ctx: typer.Context) -> BuildTracker:
    """Build a tracker from the config the app callback stored on the context."""
    config = ctx.obj if isinstance(ctx.obj, TrackerConfig) else TrackerConfig()
    return BuildTracker(config=config)


def fail(console: Console, action: str, exc: Exception) -> typer.Exit:
    """Print an error for ``action`` and return the exit to raise."""
    console.print(f"[red]Error {action}:[/red] {escape(str(exc))}")
    return typer.Exit(code=1)
