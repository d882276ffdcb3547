"""Logging setup for the build tracker.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
CLI calls ``setup_logging`` once to attach a Rich handler to the package
logger.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "buildtracker"


def setup_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """Attach a ``RichHandler`` to the package logger and set its level.

    Calling this again only updates the level; handlers are never stacked.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
