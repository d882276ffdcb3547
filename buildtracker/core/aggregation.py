"""Aggregator — pure read-only views over the HistoryStore.

The Aggregator does not compute truth — it summarises it.  Every call
re-reads the history document; nothing is cached between calls.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from buildtracker.core.history_store import HistoryStore
from buildtracker.models.builds import BuildRecord, BuildStatus
from buildtracker.models.reports import BuildReport, BuildStats

REPORT_RECENT_LIMIT = 10


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3), unlike ``round()``."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compute_stats(builds: Sequence[BuildRecord]) -> BuildStats:
    """Compute statistics over records given most-recent first."""
    total = len(builds)
    if total == 0:
        return BuildStats()

    success = sum(1 for b in builds if b.status == BuildStatus.SUCCESS.value)
    failed = sum(1 for b in builds if b.status == BuildStatus.FAILED.value)

    durations = [b.duration_minutes for b in builds if b.duration_minutes is not None]
    average_duration = (
        round_half_up(sum(durations) / len(durations), 1) if durations else None
    )

    return BuildStats(
        total=total,
        success=success,
        failed=failed,
        success_rate=int(round_half_up(success / total * 100)),
        average_duration=average_duration,
        most_recent=builds[0].timestamp or None,
    )


class Aggregator:
    """Statistics and reports derived from the build history.

    Parameters
    ----------
    store:
        The HistoryStore to read from.
    recent_limit:
        Number of recent builds included in a report.
    """

    def __init__(self, store: HistoryStore, recent_limit: int = REPORT_RECENT_LIMIT) -> None:
        self._store = store
        self.recent_limit = recent_limit

    def list_builds(self, limit: int) -> list[BuildRecord]:
        """Return the ``limit`` most recent builds, newest first.

        A limit larger than the history returns everything; 0 returns an
        empty list.
        """
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        return list(self._store.load().builds[:limit])

    def stats(self) -> BuildStats:
        """Compute statistics over the current history."""
        return compute_stats(self._store.load().builds)

    def report(self) -> BuildReport:
        """Statistics plus the most recent builds."""
        return BuildReport(
            stats=self.stats(),
            recent_builds=self.list_builds(self.recent_limit),
        )
