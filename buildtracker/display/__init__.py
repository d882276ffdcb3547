"""Terminal presentation for the build tracker.

Modules
-------
formatting
    Plain helpers turning durations, statuses, timestamps, and repository
    URLs into display strings.
renderer
    ``HistoryRenderer`` turns tracker results into Rich renderables.
"""
