"""Pydantic models for webhook payloads and API responses."""

import re
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

T = TypeVar("T")

_ISSUE_URL = re.compile(r"^https://api\.github\.com/repos/[^/]*/[^/]*/issues/([0-9]+)$")
_COLUMN_URL = re.compile(r"/projects/columns/([0-9]+)$")


class MalformedPayloadError(Exception):
    """Webhook body is not JSON or does not match the event's schema."""


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class WebhookAck(BaseModel):
    """Acknowledgement returned for every webhook delivery."""

    status: str


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""

    status: str
    version: str
    active_tasks: int


class WebhookPayload(BaseModel):
    """Base for webhook payloads; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")


# Pull request events


class RepoInfo(WebhookPayload):
    html_url: str


class BaseRef(WebhookPayload):
    ref: str
    repo: RepoInfo

    @property
    def repo_url(self) -> str:
        return self.repo.html_url


class HeadRef(WebhookPayload):
    sha: str
    ref: str
    repo: RepoInfo | None = None  # None when the fork was deleted

    @property
    def repo_url(self) -> str | None:
        return self.repo.html_url if self.repo else None


class Label(WebhookPayload):
    name: str


class PullRequest(WebhookPayload):
    number: int
    head: HeadRef
    base: BaseRef
    labels: list[Label] = Field(default_factory=list)
    merged: bool | None = False


class PullRequestEvent(WebhookPayload):
    """A ``pull_request`` webhook delivery."""

    action: str
    pull_request: PullRequest

    @property
    def number(self) -> int:
        return self.pull_request.number

    @property
    def head(self) -> HeadRef:
        return self.pull_request.head

    @property
    def base(self) -> BaseRef:
        return self.pull_request.base

    @property
    def labels(self) -> set[str]:
        return {label.name for label in self.pull_request.labels}

    @property
    def merged(self) -> bool:
        return bool(self.pull_request.merged)


# Push events


class Commit(WebhookPayload):
    message: str


class PushEvent(WebhookPayload):
    """A ``push`` webhook delivery."""

    ref: str
    commits: list[Commit] = Field(default_factory=list)


# Project card events


class ProjectCardInfo(WebhookPayload):
    content_url: str | None = None
    column_url: str | None = None
    column_id: int | None = None


class ProjectCardEvent(WebhookPayload):
    """A ``project_card`` webhook delivery."""

    action: str
    project_card: ProjectCardInfo

    @property
    def issue_number(self) -> int | None:
        """Number of the issue or PR the card points to, if any."""
        match = _ISSUE_URL.match(self.project_card.content_url or "")
        return int(match.group(1)) if match else None

    @property
    def column(self) -> int | None:
        """Database id of the column the card was in."""
        if self.project_card.column_id is not None:
            return self.project_card.column_id
        match = _COLUMN_URL.search(self.project_card.column_url or "")
        return int(match.group(1)) if match else None


# CI job events


class BuildJob(WebhookPayload):
    """A ``job`` webhook delivery from the CI provider."""

    build_id: int
    project_id: int
    build_name: str
    sha: str
    build_status: str
    build_failure_reason: str | None = None
    build_allow_failure: bool = False


EVENT_MODELS: dict[str, type[WebhookPayload]] = {
    "pull_request": PullRequestEvent,
    "push": PushEvent,
    "project_card": ProjectCardEvent,
    "job": BuildJob,
}

# Path names accepted in addition to the canonical event types.
EVENT_ALIASES = {"project": "project_card"}


def decode_event(event_type: str, body: bytes | str) -> WebhookPayload:
    """Parse a webhook body into the model for ``event_type``.

    Raises:
        KeyError: If the event type is unknown
        MalformedPayloadError: If the body is not valid JSON for that event
    """
    model = EVENT_MODELS[event_type]
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise MalformedPayloadError(f"Malformed {event_type} payload: {e}") from e
