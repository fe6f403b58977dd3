"""Data models for Git Manager."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MirrorBranch:
    """The per-PR branch on the CI mirror that triggers pipelines."""

    number: int

    @property
    def name(self) -> str:
        return f"pr-{self.number}"


def staging_branch(target: str) -> str:
    """Mirror branch receiving the result of a backport to ``target``."""
    return f"staging-{target}"
