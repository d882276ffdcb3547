"""Derived views over the build history.

These models are never persisted — they are computed fresh from the
history document on every call.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from buildtracker.models.builds import BuildRecord


class BuildStats(BaseModel):
    """Aggregate statistics over the stored builds.

    The empty history is a defined base case: every count is 0,
    ``success_rate`` is 0, and ``average_duration``/``most_recent`` are
    ``None``.
    """

    model_config = ConfigDict(frozen=True)

    total: int = 0
    success: int = 0
    failed: int = 0
    success_rate: int = 0  # integer percentage
    average_duration: float | None = None  # minutes, one decimal place
    most_recent: str | None = None  # timestamp of the newest build


class BuildReport(BaseModel):
    """Statistics plus the most recent builds."""

    model_config = ConfigDict(frozen=True)

    stats: BuildStats
    recent_builds: list[BuildRecord] = []
