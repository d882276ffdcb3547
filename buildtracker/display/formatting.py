"""Human-readable formatting for build fields.

All helpers return Rich markup strings or plain text; none of them touch
the console.
"""

from __future__ import annotations

from datetime import datetime, timezone

from rich.markup import escape

from buildtracker.core.aggregation import round_half_up
from buildtracker.models.builds import BuildStatus

GITHUB_PREFIX = "https://github.com/"

_STATUS_LABELS: dict[BuildStatus, str] = {
    BuildStatus.SUCCESS: "[green]✓ Success[/green]",
    BuildStatus.FAILED: "[red]✗ Failed[/red]",
    BuildStatus.RUNNING: "[yellow]⚡ Running[/yellow]",
}


def _trim(value: float) -> str:
    """Render 2.0 as "2" and 2.5 as "2.5"."""
    return f"{value:.1f}".rstrip("0").rstrip(".")


def format_duration(minutes: float | None) -> str:
    """Format a duration in minutes as seconds, minutes, or hours."""
    if minutes is None:
        return "N/A"
    if minutes < 1:
        return f"{int(round_half_up(minutes * 60))}s"
    if minutes < 60:
        return f"{_trim(round_half_up(minutes, 1))}m"
    return f"{_trim(round_half_up(minutes / 60, 1))}h"


def format_status(status: str) -> str:
    """Coloured status label; unrecognized values show as ``? <value>``."""
    known = BuildStatus.parse(status)
    if known is None:
        return f"[dim]? {escape(status)}[/dim]"
    return _STATUS_LABELS[known]


def parse_timestamp(timestamp: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as local time."""
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def format_timestamp(timestamp: str, now: datetime | None = None) -> str:
    """Relative age for recent builds, calendar date for older ones."""
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return timestamp
    now = now or datetime.now(timezone.utc)
    hours = (now - parsed).total_seconds() / 3600

    if hours < 24:
        return f"{int(round_half_up(hours))}h ago"
    if hours < 24 * 7:
        return f"{int(round_half_up(hours / 24))}d ago"
    return parsed.astimezone().strftime("%Y-%m-%d")


def short_repo(repo_url: str | None) -> str:
    """Strip the GitHub host from a repository URL."""
    if not repo_url:
        return "N/A"
    return repo_url.removeprefix(GITHUB_PREFIX)


def success_bar(success_rate: int, width: int = 40) -> str:
    """Filled/empty block bar for a success percentage."""
    filled = int(round_half_up(success_rate / 100 * width))
    filled = max(0, min(width, filled))
    return "█" * filled + "░" * (width - filled)
