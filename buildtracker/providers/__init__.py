"""Pluggable host introspection providers.

Modules
-------
base
    ``ResourceUsageProvider`` and ``GitInfoProvider`` Protocols plus
    null implementations.
resources
    ``PsutilResourceProvider`` — load average and memory via psutil.
git
    ``SubprocessGitProvider`` — commit hash and origin URL via ``git``.
"""

from buildtracker.providers.base import (
    GitInfoProvider,
    NullGitProvider,
    NullResourceProvider,
    ResourceUsageProvider,
)
from buildtracker.providers.git import SubprocessGitProvider
from buildtracker.providers.resources import PsutilResourceProvider

__all__ = [
    "ResourceUsageProvider",
    "GitInfoProvider",
    "NullResourceProvider",
    "NullGitProvider",
    "PsutilResourceProvider",
    "SubprocessGitProvider",
]
