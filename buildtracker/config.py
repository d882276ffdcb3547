"""Tracker configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and BUILDTRACKER_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HISTORY_PATH = Path.home() / "clawd" / "memory" / "build-history.json"


class TrackerConfig(BaseSettings):
    """Tracker configuration with environment variable overrides.

    All settings can be overridden via BUILDTRACKER_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export BUILDTRACKER_HISTORY_PATH=/tmp/build-history.json
        export BUILDTRACKER_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDTRACKER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    history_path: Path = DEFAULT_HISTORY_PATH
    max_history: int = Field(default=100, ge=1)

    # Read-side defaults
    list_limit: int = Field(default=20, ge=0)
    recent_limit: int = Field(default=10, ge=0)

    # Host introspection
    git_timeout_seconds: float = 5.0

    # Logging
    log_level: str = "WARNING"
    debug: bool = False

    @property
    def effective_log_level(self) -> str:
        """DEBUG when ``debug`` is set, otherwise ``log_level``."""
        return "DEBUG" if self.debug else self.log_level.upper()
