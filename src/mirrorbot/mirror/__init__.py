"""PR Mirror Protocol - Mirrors pull requests to the CI repository."""

from mirrorbot.mirror.protocol import (
    MIRROR_ACTIONS,
    REBASE_LABEL,
    STALE_BRANCH_DESCRIPTION,
    PRMirror,
)

__all__ = [
    "MIRROR_ACTIONS",
    "REBASE_LABEL",
    "STALE_BRANCH_DESCRIPTION",
    "PRMirror",
]
