"""GitHubGraphQL - Pull request, project card and team queries."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mirrorbot.github.exceptions import GraphQLError, PullRequestNotFoundError
from mirrorbot.github.models import (
    Milestone,
    ProjectCard,
    ProjectColumn,
    PullRequestMilestone,
    PullRequestRefs,
)

logger = logging.getLogger("mirrorbot.github.graphql")

MILESTONE_FRAGMENT = """
fragment milestone on Milestone {
    title
    description
}
"""

PROJECT_COLUMN_FRAGMENT = """
fragment projectColumn on ProjectColumn {
    id
    databaseId
}
"""

PROJECT_CARD_FRAGMENT = (
    """
fragment projectCard on ProjectCard {
    id
    column { ...projectColumn }
    project {
        columns(first: 100) {
            nodes { ...projectColumn }
        }
    }
}
"""
    + PROJECT_COLUMN_FRAGMENT
)


def _milestone(data: dict[str, Any] | None) -> Milestone | None:
    if not data:
        return None
    return Milestone(title=data.get("title") or "", description=data.get("description") or "")


def _column(data: dict[str, Any]) -> ProjectColumn:
    return ProjectColumn(id=data["id"], db_id=int(data["databaseId"]))


def _card(data: dict[str, Any]) -> ProjectCard:
    nodes = data.get("project", {}).get("columns", {}).get("nodes", [])
    return ProjectCard(
        id=data["id"],
        column=_column(data["column"]),
        columns=[_column(node) for node in nodes],
    )


class GitHubGraphQL:
    """GraphQL client for the forge repository the bot manages."""

    def __init__(
        self,
        repo: str,
        token: str,
        base_url: str = "https://api.github.com/graphql",
    ) -> None:
        """Initialize the GraphQL client.

        Args:
            repo: GitHub repo in "owner/repo" format
            token: GitHub access token
            base_url: GitHub GraphQL API URL (for testing/enterprise)
        """
        self.repo = repo
        self.owner, self.repo_name = repo.split("/")
        self.token = token
        self.base_url = base_url
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the GraphQL API."""
        if self._client is None:
            self._client = httpx.Client(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                    "User-Agent": "coqbot",
                },
                timeout=30.0,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            Response data

        Raises:
            GraphQLError: If the request fails or the response carries errors
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        response = self.client.post(self.base_url, json=payload)

        if response.status_code != 200:
            raise GraphQLError(f"GraphQL request failed: {response.status_code} - {response.text}")

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise GraphQLError(f"Malformed GraphQL response: {e}") from e
        if data.get("errors"):
            raise GraphQLError(f"GraphQL errors: {data['errors']}")

        return dict(data["data"])

    def _pull_request(self, query: str, number: int) -> dict[str, Any]:
        data = self._graphql(
            query,
            {"owner": self.owner, "repo": self.repo_name, "number": number},
        )
        pull_request = (data.get("repository") or {}).get("pullRequest")
        if not pull_request:
            raise PullRequestNotFoundError(f"Pull request #{number} not found in {self.repo}")
        return dict(pull_request)

    def pull_request_id_and_milestone(self, number: int) -> PullRequestMilestone:
        """Get a pull request's node id, database id and milestone.

        Raises:
            PullRequestNotFoundError: If the pull request doesn't exist
        """
        query = (
            """
        query prInfo($owner: String!, $repo: String!, $number: Int!) {
            repository(owner: $owner, name: $repo) {
                pullRequest(number: $number) {
                    id
                    databaseId
                    milestone { ...milestone }
                }
            }
        }
        """
            + MILESTONE_FRAGMENT
        )
        pr = self._pull_request(query, number)
        return PullRequestMilestone(
            node_id=pr["id"],
            database_id=int(pr["databaseId"]),
            milestone=_milestone(pr.get("milestone")),
        )

    def pull_request_milestone_and_cards(
        self, number: int
    ) -> tuple[list[ProjectCard], Milestone | None]:
        """Get a pull request's project cards (with sibling columns) and milestone.

        Raises:
            PullRequestNotFoundError: If the pull request doesn't exist
        """
        query = (
            """
        query prCards($owner: String!, $repo: String!, $number: Int!) {
            repository(owner: $owner, name: $repo) {
                pullRequest(number: $number) {
                    milestone { ...milestone }
                    projectCards(first: 100) {
                        nodes { ...projectCard }
                    }
                }
            }
        }
        """
            + MILESTONE_FRAGMENT
            + PROJECT_CARD_FRAGMENT
        )
        pr = self._pull_request(query, number)
        nodes = (pr.get("projectCards") or {}).get("nodes") or []
        cards = [_card(node) for node in nodes if node and node.get("column")]
        logger.debug("PR #%d has %d project card(s)", number, len(cards))
        return cards, _milestone(pr.get("milestone"))

    def move_card_to_column(self, card_id: str, column_id: str) -> None:
        """Move a project card to another column of the same project.

        Args:
            card_id: GraphQL node id of the card
            column_id: GraphQL node id of the target column
        """
        logger.info("Moving card %s to column %s", card_id, column_id)
        mutation = """
        mutation moveCard($cardId: ID!, $columnId: ID!) {
            moveProjectCard(input: {cardId: $cardId, columnId: $columnId}) {
                clientMutationId
            }
        }
        """
        self._graphql(mutation, {"cardId": card_id, "columnId": column_id})

    def pull_request_refs(self, number: int) -> PullRequestRefs:
        """Get a pull request's base/head branch names, commit ids and merged flag.

        Raises:
            PullRequestNotFoundError: If the pull request doesn't exist
        """
        query = """
        query prRefs($owner: String!, $repo: String!, $number: Int!) {
            repository(owner: $owner, name: $repo) {
                pullRequest(number: $number) {
                    baseRefName
                    baseRefOid
                    headRefName
                    headRefOid
                    merged
                }
            }
        }
        """
        pr = self._pull_request(query, number)
        return PullRequestRefs(
            base_ref=pr["baseRefName"],
            base_sha=pr["baseRefOid"],
            head_ref=pr["headRefName"],
            head_sha=pr["headRefOid"],
            merged=bool(pr["merged"]),
        )

    def team_membership(self, org: str, team: str, user: str) -> bool:
        """Whether ``user`` is a member of team ``org/team``.

        Raises:
            GraphQLError: If the organization or team doesn't exist
        """
        query = """
        query teamMember($org: String!, $team: String!, $user: String!) {
            organization(login: $org) {
                team(slug: $team) {
                    members(query: $user, first: 1) {
                        nodes { login }
                    }
                }
            }
        }
        """
        data = self._graphql(query, {"org": org, "team": team, "user": user})
        organization = data.get("organization")
        if not organization:
            raise GraphQLError(f"Organization {org} does not exist.")
        team_data = organization.get("team")
        if not team_data:
            raise GraphQLError(f"Team @{org}/{team} does not exist.")
        members = (team_data.get("members") or {}).get("nodes") or []
        return any(member and member.get("login") == user for member in members)
