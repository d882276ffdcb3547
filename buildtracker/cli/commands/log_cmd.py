"""``build-tracker log`` — record a build.

Gathers git provenance for ``--directory`` and a host resource snapshot,
then prepends the build to the history file.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from buildtracker.cli.commands._context import fail, get_tracker
from buildtracker.core.errors import TrackerError
from buildtracker.display.renderer import HistoryRenderer
from buildtracker.models.builds import BuildInput

console = Console()


def log_cmd(
    ctx: typer.Context,
    project: str = typer.Option(
        ...,
        "--project",
        "-p",
        help="Project name.",
    ),
    status: str = typer.Option(
        ...,
        "--status",
        "-s",
        help="Build status (success/failed/running).",
    ),
    description: str = typer.Option(
        "",
        "--description",
        "-d",
        help="Build description.",
    ),
    repo_url: str = typer.Option(
        None,
        "--repo-url",
        "-r",
        help="Repository URL; overrides the git origin of --directory.",
    ),
    duration: float = typer.Option(
        None,
        "--duration",
        "-t",
        help="Build duration in minutes.",
    ),
    notes: str = typer.Option(
        "",
        "--notes",
        "-n",
        help="Additional notes.",
    ),
    directory: str = typer.Option(
        None,
        "--directory",
        help="Project directory used for git info (default: current directory).",
    ),
) -> None:
    """Log a build to the history file."""
    try:
        build_input = BuildInput(
            project=project,
            status=status,
            description=description,
            duration=duration,
            repo_url=repo_url or None,
            notes=notes,
            directory=Path(directory) if directory else Path.cwd(),
        )
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise fail(console, "logging build", ValueError(errors))

    try:
        build = get_tracker(ctx).log_build(build_input)
    except TrackerError as exc:
        raise fail(console, "logging build", exc)

    HistoryRenderer(console=console).print_logged(build)
