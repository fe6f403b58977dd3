"""Custom exceptions for Git Manager."""


class GitManagerError(Exception):
    """Base exception for Git Manager errors."""


class WorkspaceError(GitManagerError):
    """Error preparing a scratch working tree."""


class FetchError(GitManagerError):
    """Error fetching or checking out a ref."""


class MergeError(GitManagerError):
    """Ref could not be fast-forward merged."""


class PushError(GitManagerError):
    """Error pushing to or deleting from the mirror."""
