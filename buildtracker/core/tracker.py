"""BuildTracker — the entry point the CLI talks to.

Wires the HistoryStore, the Aggregator, and the host providers together.
``log_build`` is the only operation that writes; the other three are
read-only views.

Provider failures are the one place where errors are caught: a build is
logged even from a non-git directory or a host without load figures, with
the affected fields left ``None``.  Storage errors always propagate.
"""

from __future__ import annotations

import logging

from buildtracker.config import TrackerConfig
from buildtracker.core.aggregation import Aggregator
from buildtracker.core.history_store import HistoryStore
from buildtracker.models.builds import (
    BuildInput,
    BuildRecord,
    GitInfo,
    ResourceSnapshot,
    ResourceUsage,
)
from buildtracker.models.reports import BuildReport, BuildStats
from buildtracker.providers.base import GitInfoProvider, ResourceUsageProvider
from buildtracker.providers.git import SubprocessGitProvider
from buildtracker.providers.resources import PsutilResourceProvider

logger = logging.getLogger(__name__)


class BuildTracker:
    """Logs builds and answers questions about the build history.

    Parameters
    ----------
    config:
        Tracker configuration.  Uses env-driven defaults if not provided.
    store:
        History store.  Built from ``config.history_path`` if not provided.
    resource_provider:
        Host resource backend.  Defaults to ``PsutilResourceProvider``.
    git_provider:
        Git provenance backend.  Defaults to ``SubprocessGitProvider``.
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        *,
        store: HistoryStore | None = None,
        resource_provider: ResourceUsageProvider | None = None,
        git_provider: GitInfoProvider | None = None,
    ) -> None:
        self.config = config or TrackerConfig()
        self.store = store or HistoryStore(
            self.config.history_path, max_history=self.config.max_history
        )
        self.aggregator = Aggregator(self.store, recent_limit=self.config.recent_limit)
        self.resource_provider = resource_provider or PsutilResourceProvider()
        self.git_provider = git_provider or SubprocessGitProvider(
            timeout=self.config.git_timeout_seconds
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def log_build(self, build: BuildInput) -> BuildRecord:
        """Record a build event and return the stored record."""
        resources_start = self._resource_snapshot()
        git_info = self._git_info(build)

        record = BuildRecord(
            project=build.project,
            description=build.description,
            status=build.status,
            duration_minutes=build.duration,
            resource_usage=ResourceUsage(start=resources_start, end=build.end_resources),
            commit_hash=git_info.commit_hash,
            repo_url_from_git=git_info.repo_url,
            repo_url=build.repo_url or git_info.repo_url,
            notes=build.notes,
        )
        return self.store.append(record)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_builds(self, limit: int | None = None) -> list[BuildRecord]:
        """Most recent builds, newest first (default ``config.list_limit``)."""
        return self.aggregator.list_builds(
            self.config.list_limit if limit is None else limit
        )

    def get_stats(self) -> BuildStats:
        return self.aggregator.stats()

    def generate_report(self) -> BuildReport:
        return self.aggregator.report()

    # ------------------------------------------------------------------
    # Provider calls (best effort)
    # ------------------------------------------------------------------

    def _resource_snapshot(self) -> ResourceSnapshot:
        try:
            return self.resource_provider.get_resource_usage()
        except Exception as exc:
            logger.warning("Could not get resource usage: %s", exc)
            return ResourceSnapshot()

    def _git_info(self, build: BuildInput) -> GitInfo:
        try:
            return self.git_provider.get_git_info(build.directory)
        except Exception as exc:
            logger.warning("Could not read git info for %s: %s", build.directory, exc)
            return GitInfo()
