"""Bounded, most-recent-first build history backed by a single JSON file.

The History Store is the source of truth.  The Aggregator is a read-only
view over it — it never writes.

Design:
- One JSON document: ``{"builds": [...]}``, newest record first.
- Append-only: ``append()`` is the only mutation; there is no update or
  delete by id.
- Bounded: every append truncates the document to ``max_history`` records,
  dropping the oldest.
- Whole-document writes go to a temp file that is then ``os.replace``d over
  the target, so readers never see a half-written document.
- ``append()`` holds an exclusive ``flock`` on ``<history>.lock`` for its
  load -> save cycle, and while creating a missing file.  Reads of an
  existing file take no lock.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import stat
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import ValidationError

from buildtracker.core.errors import CorruptDataError, StorageError
from buildtracker.models.builds import BuildRecord, HistoryDocument

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 100


class HistoryStore:
    """Durable, bounded, ordered storage of build records.

    Parameters
    ----------
    history_path:
        Path to the JSON history file.  Created (with parents) on first use.
    max_history:
        Retention cap.  Records beyond it are discarded on every append.
    """

    def __init__(self, history_path: Path, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")
        self._path = Path(history_path).expanduser()
        self._lock_path = self._path.with_name(self._path.name + ".lock")
        self.max_history = max_history

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def ensure_exists(self) -> None:
        """Create an empty history document if the file is absent.

        Idempotent: an existing file is never touched.  Creation happens
        under the append lock so it can never overwrite a concurrent append.
        """
        if self._path.exists():
            return
        self._ensure_directory()
        with self._exclusive_lock():
            self._create_if_absent()

    def load(self) -> HistoryDocument:
        """Read and parse the history document.

        Raises
        ------
        StorageError
            If the file cannot be created or read.
        CorruptDataError
            If the file is not valid JSON or is not ``{"builds": [...]}``.
            The file is left as-is; it is never reset silently.
        """
        self.ensure_exists()
        return self._read()

    def save(self, document: HistoryDocument) -> None:
        """Overwrite the history file with the full, pretty-printed document.

        The file keeps its current permission bits; a new file gets the
        process umask applied to 0o666.
        """
        payload = json.dumps(
            document.model_dump(mode="json"),
            indent=2,
            ensure_ascii=False,
            allow_nan=False,
        )
        tmp_path: str | None = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.stem}_",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.write("\n")
            os.chmod(tmp_path, self._target_mode())
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as exc:
            raise StorageError(
                f"Cannot write history file {self._path}: {exc}", self._path
            ) from exc
        finally:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)

        logger.debug(
            "Saved %d build(s) to %s", len(document.builds), self._path
        )

    # ------------------------------------------------------------------
    # Core: the only write path
    # ------------------------------------------------------------------

    def append(self, record: BuildRecord) -> BuildRecord:
        """Prepend a record, truncate to ``max_history``, and persist.

        Returns the stored record unchanged.
        """
        self._ensure_directory()
        with self._exclusive_lock():
            self._create_if_absent()
            document = self._read()
            builds = [record, *document.builds]
            dropped = len(builds) - self.max_history
            if dropped > 0:
                builds = builds[: self.max_history]
                logger.debug("Truncated %d oldest build(s) from history", dropped)
            self.save(document.model_copy(update={"builds": builds}))

        logger.info(
            "Logged build %s for project %s (%s)", record.id, record.project, record.status
        )
        return record

    # ------------------------------------------------------------------
    # Query helpers (read-only)
    # ------------------------------------------------------------------

    def count(self) -> int:
        """Return the number of stored records."""
        return len(self.load().builds)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_directory(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Cannot create history directory {self._path.parent}: {exc}",
                self._path,
            ) from exc

    def _create_if_absent(self) -> None:
        """Write an empty document; caller holds the lock."""
        if self._path.exists():
            return
        self.save(HistoryDocument())
        logger.info("Created empty build history at %s", self._path)

    def _read(self) -> HistoryDocument:
        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptDataError(
                f"History file {self._path} is not valid UTF-8: {exc}", self._path
            ) from exc
        except OSError as exc:
            raise StorageError(
                f"Cannot read history file {self._path}: {exc}", self._path
            ) from exc

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CorruptDataError(
                f"History file {self._path} is not valid JSON: {exc}", self._path
            ) from exc

        if not isinstance(raw, dict) or not isinstance(raw.get("builds"), list):
            raise CorruptDataError(
                f"History file {self._path} must contain an object with a 'builds' list",
                self._path,
            )

        try:
            return HistoryDocument.model_validate(raw)
        except ValidationError as exc:
            raise CorruptDataError(
                f"History file {self._path} holds malformed build records: {exc}",
                self._path,
            ) from exc

    def _target_mode(self) -> int:
        """Permission bits for the next write of the history file."""
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    @contextmanager
    def _exclusive_lock(self) -> Iterator[None]:
        """Hold an exclusive advisory lock for a read-modify-write cycle."""
        try:
            fh = open(self._lock_path, "a+", encoding="utf-8")
        except OSError as exc:
            raise StorageError(
                f"Cannot open history lock {self._lock_path}: {exc}", self._path
            ) from exc
        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        finally:
            fh.close()
