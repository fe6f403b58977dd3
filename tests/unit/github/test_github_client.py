"""Unit tests for GitHubClient."""

from unittest.mock import MagicMock

import pytest

from mirrorbot.github import PROJECTS_PREVIEW_HEADER, ColumnCard, GitHubClient, GitHubError


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock HTTP client."""
    return MagicMock()


@pytest.fixture
def github(mock_client: MagicMock) -> GitHubClient:
    """Create a GitHubClient instance with mocked client."""
    client = GitHubClient(repo="coq/coq", token="test-token")
    client._client = mock_client
    return client


def _mock_response(status_code: int = 200, data=None, text: str = "") -> MagicMock:
    """Create a mock REST response."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data
    response.text = text
    return response


@pytest.mark.unit
class TestLabels:
    """Tests for add_label and remove_label."""

    def test_add_label(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(200, [])

        github.add_label(123, "needs: rebase")

        mock_client.post.assert_called_once_with(
            "/repos/coq/coq/issues/123/labels", json=["needs: rebase"]
        )

    def test_add_label_failure(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(403, text="Forbidden")

        with pytest.raises(GitHubError) as exc_info:
            github.add_label(123, "needs: rebase")

        assert "403" in str(exc_info.value)

    def test_remove_label_quotes_name(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.delete.return_value = _mock_response(200, [])

        github.remove_label(123, "needs: rebase")

        mock_client.delete.assert_called_once_with(
            "/repos/coq/coq/issues/123/labels/needs%3A%20rebase"
        )

    def test_remove_absent_label(self, github: GitHubClient, mock_client: MagicMock) -> None:
        """A 404 means the label was already gone."""
        mock_client.delete.return_value = _mock_response(404, text="Label does not exist")

        github.remove_label(123, "needs: rebase")

    def test_remove_label_failure(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.delete.return_value = _mock_response(500, text="oops")

        with pytest.raises(GitHubError):
            github.remove_label(123, "needs: rebase")


@pytest.mark.unit
class TestMilestones:
    """Tests for set_milestone and clear_milestone."""

    def test_set_milestone(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.patch.return_value = _mock_response(200, {})

        github.set_milestone(123, 30)

        mock_client.patch.assert_called_once_with(
            "/repos/coq/coq/issues/123", json={"milestone": 30}
        )

    def test_clear_milestone(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.patch.return_value = _mock_response(200, {})

        github.clear_milestone(123)

        mock_client.patch.assert_called_once_with(
            "/repos/coq/coq/issues/123", json={"milestone": None}
        )

    def test_set_milestone_failure(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.patch.return_value = _mock_response(422, text="Validation Failed")

        with pytest.raises(GitHubError):
            github.set_milestone(123, 999)


@pytest.mark.unit
class TestProjectCards:
    """Tests for add_card_to_column and list_cards_in_column."""

    def test_add_card(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(201, {"id": 1})

        github.add_card_to_column(555, 7)

        mock_client.post.assert_called_once_with(
            "/projects/columns/7/cards",
            json={"content_id": 555, "content_type": "PullRequest"},
            headers=PROJECTS_PREVIEW_HEADER,
        )

    def test_add_card_failure(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(422, text="Project already has the card")

        with pytest.raises(GitHubError):
            github.add_card_to_column(555, 7)

    def test_list_cards(self, github: GitHubClient, mock_client: MagicMock) -> None:
        """Only cards pointing at an issue or pull request are kept."""
        mock_client.get.return_value = _mock_response(
            200,
            [
                {"id": 10, "content_url": "https://api.github.com/repos/coq/coq/issues/123"},
                {"id": 11, "note": "a note", "content_url": None},
                {"id": 12, "content_url": "https://api.github.com/repos/coq/coq/issues/456"},
            ],
        )

        cards = github.list_cards_in_column(7)

        assert cards == [
            ColumnCard(pr_number=123, card_id=10),
            ColumnCard(pr_number=456, card_id=12),
        ]
        mock_client.get.assert_called_once_with(
            "/projects/columns/7/cards", headers=PROJECTS_PREVIEW_HEADER
        )


@pytest.mark.unit
class TestStatusChecks:
    """Tests for status check calls."""

    def test_send_status_check(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(201, {})

        github.send_status_check(
            commit="abc123",
            state="failure",
            target_url="https://gitlab.com/coq/coq/-/jobs/42",
            context="test-suite",
            description="script_failure on GitLab CI",
        )

        mock_client.post.assert_called_once_with(
            "/repos/coq/coq/statuses/abc123",
            json={
                "state": "failure",
                "description": "script_failure on GitLab CI",
                "context": "test-suite",
                "target_url": "https://gitlab.com/coq/coq/-/jobs/42",
            },
        )

    def test_send_status_check_without_url(
        self, github: GitHubClient, mock_client: MagicMock
    ) -> None:
        mock_client.post.return_value = _mock_response(201, {})

        github.send_status_check("abc123", "failure", "", "ci/gitlab/pr-1", "not up-to-date")

        assert "target_url" not in mock_client.post.call_args.kwargs["json"]

    def test_has_status_check(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.get.return_value = _mock_response(
            200, [{"context": "build"}, {"context": "test-suite"}]
        )

        assert github.has_status_check("abc123", "test-suite")
        assert not github.has_status_check("abc123", "doc:refman")
        mock_client.get.assert_called_with("/repos/coq/coq/commits/abc123/statuses")

    def test_status_list_not_a_list(self, github: GitHubClient, mock_client: MagicMock) -> None:
        mock_client.get.return_value = _mock_response(200, {"message": "odd"})

        with pytest.raises(GitHubError):
            github.list_status_checks("abc123")

    def test_status_list_malformed_json(
        self, github: GitHubClient, mock_client: MagicMock
    ) -> None:
        response = _mock_response(200)
        response.json.side_effect = ValueError("Expecting value")
        mock_client.get.return_value = response

        with pytest.raises(GitHubError):
            github.list_status_checks("abc123")


@pytest.mark.unit
class TestClientLifecycle:
    """Tests for lazy client creation and close."""

    def test_client_created_lazily(self) -> None:
        github = GitHubClient(repo="coq/coq", token="test-token")

        client = github.client

        assert client is github.client
        assert client.headers["Authorization"] == "Bearer test-token"
        github.close()
        assert github._client is None
