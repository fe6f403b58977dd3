"""Job Outcome Handler - Reports or retries finished CI jobs."""

from mirrorbot.jobs.handler import JobOutcomeHandler

__all__ = [
    "JobOutcomeHandler",
]
