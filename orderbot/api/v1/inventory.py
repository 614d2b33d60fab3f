import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from orderbot.core.exceptions import LedgerError
from orderbot.core.services import ServiceContainer, get_services
from orderbot.schemas.order import DEFAULT_UNIT
from orderbot.schemas.response import SuccessResponse

log = logging.getLogger(__name__)

router = APIRouter()

@router.get("/{item}", response_model=SuccessResponse)
async def get_inventory_stock(
    item: str,
    unit: str = Query(DEFAULT_UNIT, description="Unit of measure, exact match."),
    services: ServiceContainer = Depends(get_services),
):
    """Fetches the stock row for an (item, unit) pair."""
    try:
        record = await services.ledger.read_stock(item, unit)
    except LedgerError as e:
        log.error(f"Error fetching stock for {item}/{unit}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Stock ledger unavailable.")

    if record.row_number is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No stock row for {item} ({unit}).")
    return SuccessResponse(data=record.model_dump())
