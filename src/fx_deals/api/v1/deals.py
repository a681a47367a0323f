"""Deal API endpoints.

POST /deals (single import), POST /deals/bulk (batch import),
GET /deals (list), GET /deals/{deal_unique_id} (lookup).
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from loguru import logger

from fx_deals.core.dependencies import get_deal_store, get_validation_limits
from fx_deals.lib.deal_validator import parse_deal, parse_deals
from fx_deals.schemas.common import ErrorResponse
from fx_deals.schemas.deal import BulkDealRequest, BulkDealResponse, DealResponse
from fx_deals.services.deal_service import (
    ValidationLimits,
    get_all_deals,
    get_deal_by_unique_id,
    import_deal,
    import_deals_bulk,
)
from fx_deals.services.deal_store import DealStore

deals_router = APIRouter(prefix="/deals", tags=["deals"])

_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@deals_router.post("", status_code=status.HTTP_201_CREATED, responses=_ERROR_RESPONSES)
async def import_single_deal(
    body: Annotated[dict[str, Any], Body(description="Deal object (snake_case or camelCase keys)")],
    store: Annotated[DealStore, Depends(get_deal_store)],
    limits: Annotated[ValidationLimits, Depends(get_validation_limits)],
) -> DealResponse:
    """Import a single FX deal.

    Values that cannot be parsed are reported as validation errors (400)
    alongside any rule violations.
    """
    request = parse_deal(body)
    logger.info(f"Received request to import deal: {request.deal_unique_id if request is not None else None}")
    return await import_deal(store, request, limits=limits)


@deals_router.post(
    "/bulk",
    status_code=status.HTTP_201_CREATED,
    responses={206: {"model": BulkDealResponse}, 400: {"model": BulkDealResponse}},
)
async def import_deal_batch(
    body: BulkDealRequest,
    response: Response,
    store: Annotated[DealStore, Depends(get_deal_store)],
    limits: Annotated[ValidationLimits, Depends(get_validation_limits)],
) -> BulkDealResponse:
    """Import a batch of FX deals, committing each one independently.

    Returns 201 when every deal was imported, 206 when some were, and 400
    when none were.
    """
    deals = parse_deals(body.deals)
    logger.info(f"Received request to import {len(deals)} deals in bulk")
    result = await import_deals_bulk(store, deals, limits=limits)
    response.status_code = result.status_code()
    logger.info(
        f"Bulk import completed with status {response.status_code}: {result.imported} imported, "
        f"{result.duplicates} duplicates, {result.failed} failed"
    )
    return result.to_response()


@deals_router.get("")
async def list_deals(
    store: Annotated[DealStore, Depends(get_deal_store)],
) -> list[DealResponse]:
    """List all stored deals."""
    return await get_all_deals(store)


@deals_router.get("/{deal_unique_id}", responses={404: {"model": ErrorResponse}})
async def get_deal(
    deal_unique_id: str,
    store: Annotated[DealStore, Depends(get_deal_store)],
) -> DealResponse:
    """Look up a stored deal by its unique identifier."""
    deal = await get_deal_by_unique_id(store, deal_unique_id)
    if deal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deal not found")
    return deal
