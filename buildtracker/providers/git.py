"""Git provenance via the ``git`` command line."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from buildtracker.models.builds import GitInfo

logger = logging.getLogger(__name__)


class SubprocessGitProvider:
    """Reads ``HEAD`` and the ``origin`` remote of a working directory.

    Commands run with ``cwd=directory``; the process working directory is
    never changed.  Returns an empty ``GitInfo`` when git is not installed,
    the directory is not a repository, or a command fails or times out.

    Parameters
    ----------
    timeout:
        Seconds allowed for each git command.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout

    def get_git_info(self, directory: Path) -> GitInfo:
        if shutil.which("git") is None:
            logger.debug("git not found on PATH; skipping provenance")
            return GitInfo()

        commit_hash = self._run(["git", "rev-parse", "HEAD"], directory)
        if commit_hash is None:
            return GitInfo()
        repo_url = self._run(["git", "config", "--get", "remote.origin.url"], directory)
        return GitInfo(commit_hash=commit_hash, repo_url=repo_url)

    def _run(self, args: list[str], directory: Path) -> str | None:
        try:
            result = subprocess.run(
                args,
                cwd=str(directory),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (subprocess.SubprocessError, OSError) as exc:
            logger.debug("%s failed in %s: %s", " ".join(args), directory, exc)
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None
