"""Health endpoint."""

from fastapi import APIRouter

from mirrorbot import __version__
from mirrorbot.api.dependencies import RouterDep
from mirrorbot.api.models import APIResponse, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=APIResponse[HealthResponse])
def health(webhook_router: RouterDep) -> APIResponse[HealthResponse]:
    """Report liveness and the number of handlers still running."""
    return APIResponse(
        data=HealthResponse(
            status="healthy",
            version=__version__,
            active_tasks=webhook_router.tracker.active,
        )
    )
