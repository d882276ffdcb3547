"""Main Typer application — imports and registers all CLI commands.

Entry point: ``build-tracker`` (configured via pyproject.toml scripts).

Commands: log, list, stats, report.
"""

from __future__ import annotations

from pathlib import Path

import typer

from buildtracker import __version__
from buildtracker.cli.commands.list_cmd import list_cmd
from buildtracker.cli.commands.log_cmd import log_cmd
from buildtracker.cli.commands.report_cmd import report_cmd
from buildtracker.cli.commands.stats_cmd import stats_cmd
from buildtracker.config import TrackerConfig
from buildtracker.logging_config import setup_logging

app = typer.Typer(
    name="build-tracker",
    help="Track nightly builds and their metadata.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="log", help="Log a build.")(log_cmd)
app.command(name="list", help="List recent builds.")(list_cmd)
app.command(name="stats", help="Show build statistics.")(stats_cmd)
app.command(name="report", help="Generate a comprehensive report.")(report_cmd)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"build-tracker {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    history_file: str = typer.Option(
        None,
        "--history-file",
        "-f",
        help="Path to the build history JSON file.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Track nightly builds and their metadata."""
    overrides: dict[str, object] = {}
    if history_file:
        overrides["history_path"] = Path(history_file)
    if debug:
        overrides["debug"] = True
    config = TrackerConfig(**overrides)

    setup_logging(config.effective_log_level)
    ctx.obj = config


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
