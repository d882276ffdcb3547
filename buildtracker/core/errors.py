"""Exceptions raised by the history store and tracker."""

from __future__ import annotations

from pathlib import Path


class TrackerError(RuntimeError):
    """Base class for build tracker failures."""


class StorageError(TrackerError):
    """Raised when the history file cannot be created, read, or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class CorruptDataError(TrackerError):
    """Raised when the history file is not valid JSON or has the wrong shape.

    The file is left untouched so it can be inspected or repaired by hand.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
