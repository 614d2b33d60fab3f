import logging
from fastapi import APIRouter, Depends, HTTPException, status
from orderbot.core.exceptions import LedgerError
from orderbot.core.services import ServiceContainer, get_services
from orderbot.schemas.order import OrderTextRequest, OutcomeStatus
from orderbot.schemas.response import SuccessResponse

router = APIRouter()
log = logging.getLogger(__name__)


@router.post("/", response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderTextRequest, services: ServiceContainer = Depends(get_services)):
    """
    Runs a plain-text utterance through the same workflow as chat messages.
    Not-understood and insufficient-stock outcomes are normal 200 responses;
    the reply text is what the chat user would have received.
    """
    try:
        outcome = await services.workflow.process(request_data.text)
    except LedgerError as e:
        log.error(f"Ledger error placing order: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Stock ledger unavailable.")

    if outcome.status == OutcomeStatus.ACCEPTED:
        log.info(f"Order {outcome.order.order_no} placed via API.")
    return SuccessResponse(message=outcome.reply, data=outcome.model_dump(mode="json"))
