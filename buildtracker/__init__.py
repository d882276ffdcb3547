"""Build Tracker: a personal log of build events.

Appends structured build records (project, status, duration, git
provenance, host resource snapshot) to a bounded local JSON history and
derives listings, statistics, and reports from it.
"""

__version__ = "1.0.0"
__description__ = "Track nightly builds and their metadata"

from buildtracker.core.history_store import HistoryStore
from buildtracker.core.tracker import BuildTracker
from buildtracker.cli.app import app as cli

__all__ = ["BuildTracker", "HistoryStore", "cli", "__version__"]
