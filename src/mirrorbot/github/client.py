"""GitHubClient - REST calls for labels, milestones, cards and status checks."""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from mirrorbot.github.exceptions import GitHubError
from mirrorbot.github.models import ColumnCard

logger = logging.getLogger("mirrorbot.github")

# Classic project boards are only served with the inertia preview media type.
PROJECTS_PREVIEW_HEADER = {"Accept": "application/vnd.github.inertia-preview+json"}

_CONTENT_URL_NUMBER = re.compile(r"^https://api\.github\.com/repos/.*/(\d+)$")


class GitHubClient:
    """REST client for the forge repository the bot manages."""

    def __init__(
        self,
        repo: str,
        token: str,
        base_url: str = "https://api.github.com",
        user_agent: str = "coqbot",
    ) -> None:
        """Initialize the REST client.

        Args:
            repo: GitHub repo in "owner/repo" format
            token: GitHub access token
            base_url: GitHub API base URL (for testing/enterprise)
            user_agent: User-Agent sent with every request
        """
        self.repo = repo
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the REST API."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "User-Agent": self.user_agent,
                },
                timeout=30.0,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    @staticmethod
    def _check(response: httpx.Response, action: str, ok: tuple[int, ...] = ()) -> None:
        if 200 <= response.status_code < 300 or response.status_code in ok:
            return
        logger.error("Failed to %s: %s - %s", action, response.status_code, response.text)
        raise GitHubError(f"Failed to {action}: {response.status_code} - {response.text}")

    @staticmethod
    def _json(response: httpx.Response, action: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise GitHubError(f"Malformed JSON while trying to {action}: {e}") from e

    def add_label(self, issue: int, label: str) -> None:
        """Add a label to an issue or pull request."""
        logger.info("Adding label '%s' to #%d", label, issue)
        response = self.client.post(f"/repos/{self.repo}/issues/{issue}/labels", json=[label])
        self._check(response, f"add label '{label}' to #{issue}")

    def remove_label(self, issue: int, label: str) -> None:
        """Remove a label from an issue or pull request.

        A label that is already absent (404) is not an error.
        """
        logger.info("Removing label '%s' from #%d", label, issue)
        response = self.client.delete(
            f"/repos/{self.repo}/issues/{issue}/labels/{quote(label, safe='')}"
        )
        self._check(response, f"remove label '{label}' from #{issue}", ok=(404,))

    def set_milestone(self, issue: int, milestone: int | None) -> None:
        """Set the milestone of an issue, or clear it with ``None``."""
        logger.info("Setting milestone of #%d to %s", issue, milestone)
        response = self.client.patch(
            f"/repos/{self.repo}/issues/{issue}", json={"milestone": milestone}
        )
        self._check(response, f"update milestone of #{issue}")

    def clear_milestone(self, issue: int) -> None:
        """Remove the milestone of an issue."""
        self.set_milestone(issue, None)

    def add_card_to_column(self, content_id: int, column_id: int) -> None:
        """Create a card for a pull request (by database id) in a project column."""
        logger.info("Adding PR %d to project column %d", content_id, column_id)
        response = self.client.post(
            f"/projects/columns/{column_id}/cards",
            json={"content_id": content_id, "content_type": "PullRequest"},
            headers=PROJECTS_PREVIEW_HEADER,
        )
        self._check(response, f"add PR {content_id} to column {column_id}")

    def send_status_check(
        self,
        commit: str,
        state: str,
        target_url: str,
        context: str,
        description: str,
    ) -> None:
        """Create or update a commit status check.

        Args:
            commit: Commit SHA
            state: One of "error", "failure", "pending", "success"
            target_url: Link shown next to the check (may be empty)
            context: Label identifying the check
            description: Human-readable summary
        """
        logger.info("Sending %s status check '%s' on %s", state, context, commit)
        payload: dict[str, str] = {
            "state": state,
            "description": description,
            "context": context,
        }
        if target_url:
            payload["target_url"] = target_url
        response = self.client.post(f"/repos/{self.repo}/statuses/{commit}", json=payload)
        self._check(response, f"send status check '{context}' on {commit}")

    def list_status_checks(self, commit: str) -> list[dict[str, Any]]:
        """List the status checks posted on a commit."""
        response = self.client.get(f"/repos/{self.repo}/commits/{commit}/statuses")
        self._check(response, f"list status checks of {commit}")
        data = self._json(response, f"list status checks of {commit}")
        if not isinstance(data, list):
            raise GitHubError(f"Unexpected status list for {commit}: {data!r}")
        return data

    def has_status_check(self, commit: str, context: str) -> bool:
        """Whether a status check with ``context`` exists on ``commit``."""
        return any(check.get("context") == context for check in self.list_status_checks(commit))

    def list_cards_in_column(self, column_id: int) -> list[ColumnCard]:
        """List the pull request and issue cards of a project column.

        Notes and cards whose content URL carries no number are skipped.
        """
        response = self.client.get(
            f"/projects/columns/{column_id}/cards", headers=PROJECTS_PREVIEW_HEADER
        )
        self._check(response, f"list cards in column {column_id}")
        data = self._json(response, f"list cards in column {column_id}")

        cards = []
        for card in data:
            match = _CONTENT_URL_NUMBER.match(card.get("content_url") or "")
            if match:
                cards.append(ColumnCard(pr_number=int(match.group(1)), card_id=card["id"]))
        logger.debug("Found %d card(s) in column %d", len(cards), column_id)
        return cards
