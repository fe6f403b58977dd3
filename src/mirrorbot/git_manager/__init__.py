"""Git Manager - Scratch workspaces and mirror branch operations."""

from mirrorbot.git_manager.exceptions import (
    FetchError,
    GitManagerError,
    MergeError,
    PushError,
    WorkspaceError,
)
from mirrorbot.git_manager.manager import GitManager
from mirrorbot.git_manager.models import MirrorBranch, staging_branch

__all__ = [
    "FetchError",
    "GitManager",
    "GitManagerError",
    "MergeError",
    "MirrorBranch",
    "PushError",
    "WorkspaceError",
    "staging_branch",
]
