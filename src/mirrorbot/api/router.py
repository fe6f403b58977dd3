"""WebhookRouter - Decodes webhook deliveries and hands them to a handler."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mirrorbot.api.models import (
    EVENT_ALIASES,
    EVENT_MODELS,
    MalformedPayloadError,
    decode_event,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from mirrorbot.api.models import WebhookPayload
    from mirrorbot.api.tasks import TaskTracker
    from mirrorbot.jobs import JobOutcomeHandler
    from mirrorbot.mirror import PRMirror
    from mirrorbot.workflow import BackportWorkflow

logger = logging.getLogger("mirrorbot.api.router")


class WebhookRouter:
    """Routes each event type to exactly one handler, without waiting for it."""

    def __init__(
        self,
        tracker: TaskTracker,
        mirror: PRMirror,
        jobs: JobOutcomeHandler,
        workflow: BackportWorkflow,
    ) -> None:
        self.tracker = tracker
        self._handlers: dict[str, Callable[[WebhookPayload], None]] = {
            "pull_request": mirror.handle,  # type: ignore[dict-item]
            "push": workflow.handle_push,  # type: ignore[dict-item]
            "project_card": workflow.handle_project_card,  # type: ignore[dict-item]
            "job": jobs.handle,  # type: ignore[dict-item]
        }

    @staticmethod
    def resolve(event_type: str) -> str | None:
        """Canonical event type for a path name, or None if unknown."""
        event_type = EVENT_ALIASES.get(event_type, event_type)
        return event_type if event_type in EVENT_MODELS else None

    def dispatch(self, event_type: str, body: bytes | str) -> bool:
        """Decode a delivery and start its handler in the background.

        A malformed body is logged and dropped: the delivery has already been
        received and nothing can be sent back.

        Returns:
            False if the event type is unknown, True otherwise.
        """
        canonical = self.resolve(event_type)
        if canonical is None:
            logger.info("Ignoring unknown event type %r", event_type)
            return False

        try:
            event = decode_event(canonical, body)
        except MalformedPayloadError as e:
            logger.error("%s", e)
            return True

        self.tracker.submit(canonical, self._handlers[canonical], event)
        return True
