"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from mirrorbot import __version__
from mirrorbot.api.dependencies import close_router, init_router
from mirrorbot.api.router import WebhookRouter
from mirrorbot.api.routes import health, webhooks
from mirrorbot.api.tasks import TaskTracker
from mirrorbot.config import Settings
from mirrorbot.git_manager import GitManager
from mirrorbot.github import GitHubClient, GitHubGraphQL
from mirrorbot.gitlab import GitLabClient
from mirrorbot.jobs import JobOutcomeHandler
from mirrorbot.mirror import PRMirror
from mirrorbot.runner import CommandRunner
from mirrorbot.workflow import BackportWorkflow

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

logger = logging.getLogger("mirrorbot.api")


def build_router(settings: Settings) -> tuple[WebhookRouter, list[Callable[[], None]]]:
    """Wire clients and handlers together.

    Returns:
        The router and the close callbacks of the HTTP clients it uses.
    """
    tracker = TaskTracker(max_workers=settings.max_workers)
    runner = CommandRunner(
        max_concurrent=settings.max_commands,
        timeout=settings.command_timeout,
        env=settings.command_env,
    )
    git = GitManager(
        runner=runner,
        mirror_remote=settings.mirror_remote,
        user_name=settings.git_user_name,
        user_email=settings.git_user_email,
    )
    github = GitHubClient(
        repo=settings.github_repo,
        token=settings.github_token,
        base_url=settings.github_api_url,
        user_agent=settings.bot_name,
    )
    graphql = GitHubGraphQL(
        repo=settings.github_repo,
        token=settings.github_token,
        base_url=f"{settings.github_api_url}/graphql",
    )
    gitlab = GitLabClient(
        token=settings.gitlab_token,
        base_url=settings.gitlab_url,
        poll_interval=settings.trace_poll_interval,
        max_attempts=settings.trace_poll_attempts,
    )

    router = WebhookRouter(
        tracker=tracker,
        mirror=PRMirror(git=git, github=github),
        jobs=JobOutcomeHandler(
            github=github,
            gitlab=gitlab,
            gitlab_project=settings.gitlab_project,
            doc_build_name=settings.doc_build_name,
            doc_artifact_url=settings.doc_artifact_url,
        ),
        workflow=BackportWorkflow(
            github=github,
            graphql=graphql,
            git=git,
            runner=runner,
            tracker=tracker,
            bot_name=settings.bot_name,
            backport_script=settings.backport_script,
        ),
    )
    return router, [github.close, graphql.close, gitlab.close]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    closers: list[Callable[[], None]] = []
    router: WebhookRouter | None = app.state.router
    if router is None:
        settings = app.state.settings or Settings.from_env()
        router, closers = build_router(settings)
        logger.info("Serving %s, mirroring to %s", settings.github_repo, settings.gitlab_project)
    init_router(router)

    yield
    # Shutdown: let running handlers finish before closing their clients
    close_router()
    for close in closers:
        close()


def create_app(settings: Settings | None = None, router: WebhookRouter | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; read from the environment at startup when None.
        router: Pre-built router, used instead of building one from settings.
    """
    app = FastAPI(
        title="mirrorbot",
        description="Webhook bot mirroring pull requests to CI and tracking backports",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings
    app.state.router = router

    app.include_router(health.router)
    app.include_router(webhooks.router)

    return app


# Default app instance (`uvicorn mirrorbot.api.app:app`)
app = create_app()
