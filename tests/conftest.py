"""Shared test fixtures for the build tracker."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from buildtracker.config import TrackerConfig
from buildtracker.core.aggregation import Aggregator
from buildtracker.core.history_store import HistoryStore
from buildtracker.core.tracker import BuildTracker
from buildtracker.models.builds import BuildRecord, GitInfo, ResourceSnapshot


# ---------------------------------------------------------------------------
# Stub providers
# ---------------------------------------------------------------------------


class StubResourceProvider:
    """Returns a fixed snapshot and counts calls."""

    def __init__(self, load_average: float | None = 0.42, memory: int | None = 37) -> None:
        self.snapshot = ResourceSnapshot(
            load_average=load_average,
            memory_usage_percent=memory,
            timestamp="2026-10-18T08:00:00+00:00",
        )
        self.calls = 0

    def get_resource_usage(self) -> ResourceSnapshot:
        self.calls += 1
        return self.snapshot


class StubGitProvider:
    """Returns fixed provenance and records the directories asked about."""

    def __init__(
        self,
        commit_hash: str | None = "0123456789abcdef0123456789abcdef01234567",
        repo_url: str | None = "https://github.com/example/widgets.git",
    ) -> None:
        self.info = GitInfo(commit_hash=commit_hash, repo_url=repo_url)
        self.directories: list[Path] = []

    def get_git_info(self, directory: Path) -> GitInfo:
        self.directories.append(directory)
        return self.info


class ExplodingProvider:
    """Violates the never-raise contract, to exercise degradation."""

    def get_resource_usage(self) -> ResourceSnapshot:
        raise RuntimeError("uptime: command not found")

    def get_git_info(self, directory: Path) -> GitInfo:
        raise OSError("git exploded")


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def history_path(tmp_dir: Path) -> Path:
    """A history file location whose parent directories do not exist yet."""
    return tmp_dir / "clawd" / "memory" / "build-history.json"


@pytest.fixture
def store(history_path: Path) -> HistoryStore:
    """Provide a fresh HistoryStore backed by a temp file."""
    return HistoryStore(history_path)


@pytest.fixture
def aggregator(store: HistoryStore) -> Aggregator:
    """Provide an Aggregator reading the test store."""
    return Aggregator(store)


@pytest.fixture
def tracker_config(history_path: Path) -> TrackerConfig:
    """TrackerConfig pointed at the temp history file."""
    return TrackerConfig(history_path=history_path)


@pytest.fixture
def resource_provider() -> StubResourceProvider:
    return StubResourceProvider()


@pytest.fixture
def git_provider() -> StubGitProvider:
    return StubGitProvider()


@pytest.fixture
def exploding_provider() -> ExplodingProvider:
    return ExplodingProvider()


@pytest.fixture
def tracker(
    tracker_config: TrackerConfig,
    resource_provider: StubResourceProvider,
    git_provider: StubGitProvider,
) -> BuildTracker:
    """Provide a BuildTracker wired to the temp store and stub providers."""
    return BuildTracker(
        config=tracker_config,
        resource_provider=resource_provider,
        git_provider=git_provider,
    )


# ---------------------------------------------------------------------------
# Record factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_record() -> Callable[..., BuildRecord]:
    """Factory fixture: build a BuildRecord with sensible defaults."""

    def _factory(
        project: str = "widgets",
        status: str = "success",
        **overrides: Any,
    ) -> BuildRecord:
        defaults: dict[str, Any] = {
            "project": project,
            "status": status,
        }
        defaults.update(overrides)
        return BuildRecord(**defaults)

    return _factory
