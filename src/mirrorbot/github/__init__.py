"""GitHub clients - REST and GraphQL access to the forge."""

from mirrorbot.github.client import PROJECTS_PREVIEW_HEADER, GitHubClient
from mirrorbot.github.exceptions import GitHubError, GraphQLError, PullRequestNotFoundError
from mirrorbot.github.graphql import GitHubGraphQL
from mirrorbot.github.models import (
    ColumnCard,
    Milestone,
    ProjectCard,
    ProjectColumn,
    PullRequestMilestone,
    PullRequestRefs,
)

__all__ = [
    "PROJECTS_PREVIEW_HEADER",
    "ColumnCard",
    "GitHubClient",
    "GitHubError",
    "GitHubGraphQL",
    "GraphQLError",
    "Milestone",
    "ProjectCard",
    "ProjectColumn",
    "PullRequestMilestone",
    "PullRequestNotFoundError",
    "PullRequestRefs",
]
