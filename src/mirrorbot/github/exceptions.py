"""Custom exceptions for the GitHub clients."""


class GitHubError(Exception):
    """Base exception for GitHub REST and GraphQL errors."""


class GraphQLError(GitHubError):
    """GraphQL request failed or returned errors."""


class PullRequestNotFoundError(GitHubError):
    """Pull request does not exist in the repository."""
