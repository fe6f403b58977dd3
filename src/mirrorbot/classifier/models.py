"""Data models for the Trace Classifier."""

from enum import Enum


class TraceVerdict(str, Enum):
    """What to do about a failed job, judging from its log."""

    WARN = "warn"  # genuine failure, report it
    RETRY = "retry"  # transient infrastructure failure
    IGNORE = "ignore"  # expected failure, nothing to report
