"""Host introspection protocols consumed by the BuildTracker.

The tracker depends only on these Protocols, never on how a provider reads
the host.  Implementations must not raise: on any failure they return a
snapshot or ``GitInfo`` with ``None`` fields.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from buildtracker.models.builds import GitInfo, ResourceSnapshot


@runtime_checkable
class ResourceUsageProvider(Protocol):
    """Protocol for host resource snapshot backends."""

    def get_resource_usage(self) -> ResourceSnapshot:
        """Return the current load average and memory usage."""
        ...


@runtime_checkable
class GitInfoProvider(Protocol):
    """Protocol for git provenance backends."""

    def get_git_info(self, directory: Path) -> GitInfo:
        """Return the commit hash and origin URL of ``directory``."""
        ...


class NullResourceProvider:
    """Reports no resource data.  Useful where the host must not be probed."""

    def get_resource_usage(self) -> ResourceSnapshot:
        return ResourceSnapshot()


class NullGitProvider:
    """Reports no git provenance."""

    def get_git_info(self, directory: Path) -> GitInfo:
        return GitInfo()
