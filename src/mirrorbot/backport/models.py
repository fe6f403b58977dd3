"""Data models for the Backport-Spec Codec."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BackportSpec:
    """Where a milestone's merged pull requests should be backported.

    Attributes:
        backport_to: Target branch name (e.g. "v8.15").
        request_inclusion_column: Database id of the column holding PRs
            that wait for their backport.
        backported_column: Database id of the column holding PRs that
            were backported.
        rejected_milestone: Milestone number given to PRs whose backport
            was rejected.
    """

    backport_to: str
    request_inclusion_column: int
    backported_column: int
    rejected_milestone: int
