"""Webhook API for mirrorbot."""

from mirrorbot.api.app import build_router, create_app
from mirrorbot.api.models import (
    APIResponse,
    BuildJob,
    MalformedPayloadError,
    ProjectCardEvent,
    PullRequestEvent,
    PushEvent,
    decode_event,
)
from mirrorbot.api.router import WebhookRouter
from mirrorbot.api.tasks import TaskTracker

__all__ = [
    "APIResponse",
    "BuildJob",
    "MalformedPayloadError",
    "ProjectCardEvent",
    "PullRequestEvent",
    "PushEvent",
    "TaskTracker",
    "WebhookRouter",
    "build_router",
    "create_app",
    "decode_event",
]
