import logging
from fastapi import APIRouter, BackgroundTasks, Depends, status
from orderbot.consumers.event_consumer import dispatch_events
from orderbot.core.services import ServiceContainer, get_services
from orderbot.schemas.response import SuccessResponse
from orderbot.schemas.webhook import WebhookRequest

router = APIRouter()
log = logging.getLogger(__name__)


@router.post("/webhook", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def line_webhook(
    payload: WebhookRequest,
    background_tasks: BackgroundTasks,
    services: ServiceContainer = Depends(get_services),
):
    """
    LINE webhook. Acknowledges right away; the events are handled after the
    response has been sent so a slow ledger never delays the acknowledgement.
    """
    log.info(f"Webhook received {len(payload.events)} event(s) for {payload.destination}")
    background_tasks.add_task(dispatch_events, payload.events, services)
    return SuccessResponse(message="OK", data={"received": len(payload.events)})
