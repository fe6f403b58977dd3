"""Custom exceptions for the GitLab client."""


class GitLabError(Exception):
    """Base exception for GitLab API errors."""


class TraceTimeoutError(GitLabError):
    """Job trace stayed empty after every polling attempt."""
