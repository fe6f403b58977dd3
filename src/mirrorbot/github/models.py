"""Data models for the GitHub clients."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Milestone:
    """A milestone's title and free-text description."""

    title: str
    description: str = ""


@dataclass(frozen=True)
class ProjectColumn:
    """A project-board column (GraphQL node id and database id)."""

    id: str
    db_id: int


@dataclass(frozen=True)
class ProjectCard:
    """A pull request's card on one project board.

    Attributes:
        id: GraphQL node id of the card.
        column: Column the card currently sits in.
        columns: All columns of the card's project.
    """

    id: str
    column: ProjectColumn
    columns: list[ProjectColumn] = field(default_factory=list)

    def sibling(self, db_id: int) -> ProjectColumn | None:
        """Return the column of this card's project with database id ``db_id``."""
        for column in self.columns:
            if column.db_id == db_id:
                return column
        return None


@dataclass(frozen=True)
class ColumnCard:
    """A card listed in a column through the REST API."""

    pr_number: int
    card_id: int


@dataclass(frozen=True)
class PullRequestMilestone:
    """Identifiers and milestone of a pull request."""

    node_id: str
    database_id: int
    milestone: Milestone | None


@dataclass(frozen=True)
class PullRequestRefs:
    """Branch names and commit ids of a pull request."""

    base_ref: str
    base_sha: str
    head_ref: str
    head_sha: str
    merged: bool
