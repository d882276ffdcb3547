"""Build record models — the persisted shape of the build history.

A ``HistoryDocument`` is the single JSON document on disk::

    {"builds": [BuildRecord, BuildRecord, ...]}   # most-recent first

Records are immutable once created.  ``status`` is kept as a free string so
that any value already persisted round-trips unchanged; ``BuildStatus``
names the values the tracker itself understands.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_build_id() -> str:
    """Time-based build identifier, e.g. ``build-1760781234567-3fa2``."""
    return f"build-{time.time_ns() // 1_000_000}-{uuid.uuid4().hex[:4]}"


class BuildStatus(str, Enum):
    """Statuses the tracker knows how to display."""

    SUCCESS = "success"
    FAILED = "failed"
    RUNNING = "running"

    @classmethod
    def parse(cls, value: str) -> BuildStatus | None:
        """Return the matching status, or ``None`` for free-text values."""
        try:
            return cls(value)
        except ValueError:
            return None


class ResourceSnapshot(BaseModel):
    """Point-in-time reading of host load and memory usage.

    Both readings are ``None`` when the host could not be inspected.
    """

    model_config = ConfigDict(frozen=True)

    load_average: float | None = None
    memory_usage_percent: int | None = None
    timestamp: str = Field(default_factory=utc_now_iso)


class ResourceUsage(BaseModel):
    """Resource snapshots bracketing a build."""

    model_config = ConfigDict(frozen=True)

    start: ResourceSnapshot
    end: ResourceSnapshot | None = None


class GitInfo(BaseModel):
    """Provenance read from a working directory; nulls outside a repository."""

    model_config = ConfigDict(frozen=True)

    commit_hash: str | None = None
    repo_url: str | None = None


class BuildRecord(BaseModel):
    """One logged build event.

    Unknown keys found in a persisted record are kept (``extra="allow"``)
    so a load/save cycle never drops data.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(default_factory=new_build_id)
    timestamp: str = Field(default_factory=utc_now_iso)
    project: str
    description: str = ""
    status: str
    duration_minutes: float | None = Field(default=None, allow_inf_nan=False)
    resource_usage: ResourceUsage = Field(
        default_factory=lambda: ResourceUsage(start=ResourceSnapshot())
    )
    commit_hash: str | None = None
    repo_url_from_git: str | None = None
    repo_url: str | None = None
    notes: str = ""

    @property
    def known_status(self) -> BuildStatus | None:
        """The status as a ``BuildStatus``, or ``None`` if unrecognized."""
        return BuildStatus.parse(self.status)


class HistoryDocument(BaseModel):
    """The full persisted collection of build records, most-recent first."""

    model_config = ConfigDict(frozen=True, extra="allow")

    builds: list[BuildRecord] = Field(default_factory=list)


class BuildInput(BaseModel):
    """Caller-supplied fields for logging a build.

    Parameters
    ----------
    project:
        Project name.  Must not be empty.
    status:
        Build status, normally one of ``BuildStatus``; free text is accepted.
    duration:
        Build duration in minutes.
    repo_url:
        Explicit repository URL; wins over the one read from git.
    directory:
        Working directory used for the git lookup.
    end_resources:
        Resource snapshot taken when the build finished, if known.
    """

    model_config = ConfigDict(frozen=True)

    project: str = Field(min_length=1)
    status: str = Field(min_length=1)
    description: str = ""
    duration: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    repo_url: str | None = None
    notes: str = ""
    directory: Path = Field(default_factory=Path.cwd)
    end_resources: ResourceSnapshot | None = None

    @field_validator("project", "status")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value
