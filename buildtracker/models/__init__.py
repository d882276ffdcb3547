"""Build tracker data models — all Pydantic v2, all frozen (immutable)."""

from buildtracker.models.builds import (
    BuildInput,
    BuildRecord,
    BuildStatus,
    GitInfo,
    HistoryDocument,
    ResourceSnapshot,
    ResourceUsage,
)
from buildtracker.models.reports import BuildReport, BuildStats

__all__ = [
    # builds
    "BuildStatus",
    "ResourceSnapshot",
    "ResourceUsage",
    "GitInfo",
    "BuildRecord",
    "HistoryDocument",
    "BuildInput",
    # reports
    "BuildStats",
    "BuildReport",
]
