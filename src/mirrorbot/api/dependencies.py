"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from mirrorbot.api.router import WebhookRouter

# Global WebhookRouter instance (initialized on app startup)
_router: WebhookRouter | None = None


def init_router(router: WebhookRouter) -> WebhookRouter:
    """Initialize the global WebhookRouter instance."""
    global _router  # noqa: PLW0603
    _router = router
    return _router


def close_router() -> None:
    """Shut down the global WebhookRouter and wait for running handlers."""
    global _router  # noqa: PLW0603
    if _router is not None:
        _router.tracker.shutdown(wait=True)
        _router = None


def get_router() -> Generator[WebhookRouter, None, None]:
    """Dependency that provides the WebhookRouter instance."""
    if _router is None:
        raise RuntimeError("WebhookRouter not initialized. Call init_router() first.")
    yield _router


# Type alias for dependency injection
RouterDep = Annotated[WebhookRouter, Depends(get_router)]
