"""GitLab client - Job retries, traces and artifact checks on the CI provider."""

from mirrorbot.gitlab.client import GitLabClient
from mirrorbot.gitlab.exceptions import GitLabError, TraceTimeoutError

__all__ = [
    "GitLabClient",
    "GitLabError",
    "TraceTimeoutError",
]
