"""Host resource snapshots via psutil."""

from __future__ import annotations

import logging

import psutil

from buildtracker.models.builds import ResourceSnapshot

logger = logging.getLogger(__name__)


class PsutilResourceProvider:
    """Reads the 1-minute load average and memory usage percentage.

    Each reading degrades to ``None`` independently, so a host without a
    load average (e.g. some containers) still reports memory.
    """

    def get_resource_usage(self) -> ResourceSnapshot:
        return ResourceSnapshot(
            load_average=self._load_average(),
            memory_usage_percent=self._memory_usage_percent(),
        )

    @staticmethod
    def _load_average() -> float | None:
        try:
            return round(psutil.getloadavg()[0], 2)
        except (OSError, AttributeError, RuntimeError) as exc:
            logger.warning("Could not read load average: %s", exc)
            return None

    @staticmethod
    def _memory_usage_percent() -> int | None:
        try:
            mem = psutil.virtual_memory()
        except (OSError, RuntimeError) as exc:
            logger.warning("Could not read memory usage: %s", exc)
            return None
        if not mem.total:
            return None
        return round((mem.total - mem.available) / mem.total * 100)
