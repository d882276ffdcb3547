"""Rich terminal renderer for build history, statistics, and reports.

Consumes only the tracker's return values (``BuildRecord``,
``BuildStats``, ``BuildReport``); it never reads the history itself.

Color scheme
------------
- green   : success
- red     : failed
- yellow  : running
- dim     : any other status
"""

from __future__ import annotations

from datetime import datetime

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from buildtracker.display.formatting import (
    format_duration,
    format_status,
    format_timestamp,
    short_repo,
    success_bar,
)
from buildtracker.models.builds import BuildRecord
from buildtracker.models.reports import BuildReport, BuildStats

REPORT_PREVIEW = 5


class HistoryRenderer:
    """Renders tracker results as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    now:
        Fixed "current time" for relative timestamps (tests); defaults to
        the wall clock at render time.
    """

    def __init__(self, console: Console | None = None, now: datetime | None = None) -> None:
        self.console = console or Console()
        self._now = now

    # ------------------------------------------------------------------
    # Renderables
    # ------------------------------------------------------------------

    def render_builds(self, builds: list[BuildRecord]) -> Table:
        """Table of builds: project, status, duration, age, repository."""
        table = Table(
            title="🔨 Recent Builds",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Project", min_width=12, max_width=20)
        table.add_column("Status", min_width=10)
        table.add_column("Duration", justify="right")
        table.add_column("When", min_width=8)
        table.add_column("Repo", max_width=40)

        for build in builds:
            table.add_row(
                escape(build.project),
                format_status(build.status),
                format_duration(build.duration_minutes),
                format_timestamp(build.timestamp, now=self._now),
                escape(short_repo(build.repo_url)),
            )
        return table

    def render_stats(self, stats: BuildStats) -> Table:
        """Two-column metric table."""
        table = Table(
            title="📊 Build Statistics",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Metric", min_width=20)
        table.add_column("Value", min_width=12)

        table.add_row("Total Builds", str(stats.total))
        table.add_row("Successful", f"[green]{stats.success}[/green]")
        table.add_row("Failed", f"[red]{stats.failed}[/red]")
        table.add_row("Success Rate", f"{stats.success_rate}%")
        table.add_row("Average Duration", format_duration(stats.average_duration))
        table.add_row(
            "Most Recent",
            format_timestamp(stats.most_recent, now=self._now) if stats.most_recent else "N/A",
        )
        return table

    def render_report(self, report: BuildReport) -> Panel:
        """Summary statistics plus a preview of the most recent builds."""
        stats = report.stats
        lines: list[str] = [
            "[bold]📊 Statistics[/bold]",
            f"Total builds: {stats.total}",
            f"Success rate: [green]{stats.success_rate}%[/green]",
            f"Average duration: {format_duration(stats.average_duration)}",
        ]

        if report.recent_builds:
            lines.append("")
            lines.append("[bold]🔨 Recent Builds[/bold]")
            for build in report.recent_builds[:REPORT_PREVIEW]:
                lines.append(
                    f"  {format_status(build.status)} {escape(build.project)} "
                    f"({format_timestamp(build.timestamp, now=self._now)})"
                )

        return Panel(
            Group(*(Text.from_markup(line) for line in lines)),
            title="[bold]📋 Build Tracker Report[/bold]",
            border_style="blue",
            padding=(1, 2),
        )

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_logged(self, build: BuildRecord) -> None:
        """Confirmation after a build was logged."""
        self.console.print("[green]✓ Build logged successfully[/green]")
        self.console.print(f"  ID: {build.id}")
        self.console.print(f"  Project: {escape(build.project)}")
        self.console.print(f"  Status: {format_status(build.status)}")
        if build.duration_minutes:
            self.console.print(f"  Duration: {format_duration(build.duration_minutes)}")
        if build.repo_url:
            self.console.print(f"  Repo: {escape(build.repo_url)}")

    def print_builds(self, builds: list[BuildRecord]) -> None:
        if not builds:
            self.console.print("[yellow]No builds found[/yellow]")
            return
        self.console.print()
        self.console.print(self.render_builds(builds))

    def print_stats(self, stats: BuildStats) -> None:
        """Statistics table, followed by a success-rate bar when non-empty."""
        self.console.print()
        self.console.print(self.render_stats(stats))
        if stats.total > 0:
            self.console.print()
            self.console.print("📈 Success Rate Visualization")
            self.console.print(
                f"[green]{success_bar(stats.success_rate)}[/green] {stats.success_rate}%"
            )

    def print_report(self, report: BuildReport) -> None:
        self.console.print()
        self.console.print(self.render_report(report))
