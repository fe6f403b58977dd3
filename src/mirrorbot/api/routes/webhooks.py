"""Webhook endpoint receiving forge and CI events."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from mirrorbot.api.dependencies import RouterDep
from mirrorbot.api.models import APIResponse, WebhookAck

router = APIRouter(tags=["webhooks"])


@router.post("/{event_type}", response_model=APIResponse[WebhookAck])
async def receive_event(
    event_type: str, request: Request, webhook_router: RouterDep
) -> APIResponse[WebhookAck] | JSONResponse:
    """Accept a delivery and process it in the background.

    The response is sent before the handler runs and does not depend on its
    outcome. Unknown event types get a 404 and are not processed.
    """
    body = await request.body()
    if not webhook_router.dispatch(event_type, body):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](data=None, error="Unknown event type").model_dump(),
        )
    return APIResponse(data=WebhookAck(status="accepted"))
