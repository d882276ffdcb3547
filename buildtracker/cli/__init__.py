"""Build tracker CLI — Typer-based command-line interface.

Provides the ``build-tracker`` command with subcommands for logging a
build, listing recent builds, showing statistics, and printing a report.

All output uses Rich for formatted terminal display.  Any tracker error
is reported in red and exits with status 1.
"""
