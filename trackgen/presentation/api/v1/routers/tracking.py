import asyncio
import logging
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from trackgen.application.use_cases.tracking_number_generate import (
    GenerateTrackingNumberUseCase,
)
from trackgen.application.validators.shipment import validate
from trackgen.core.pyd_schemas import TrackingNumberRequest
from trackgen.presentation.api.v1.dependencies.tracking import (
    get_generate_tracking_number_use_case,
)
from trackgen.presentation.api.v1.schemas.tracking import TrackingNumberResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tracking-numbers"])


@router.get("/next-tracking-number", response_model=TrackingNumberResponse)
async def next_tracking_number(
    origin_country_id: str = Query(...),
    destination_country_id: str = Query(...),
    weight: Decimal = Query(...),
    customer_id: UUID = Query(...),
    customer_name: str = Query(...),
    customer_slug: str = Query(...),
    use_case: GenerateTrackingNumberUseCase = Depends(
        get_generate_tracking_number_use_case
    ),
):
    """Issue the next unique tracking number for a shipment."""
    logger.info(
        "Received tracking number generation request for customer: %s from %s to %s",
        customer_id,
        origin_country_id,
        destination_country_id,
    )
    request = TrackingNumberRequest(
        origin_country_id=origin_country_id,
        destination_country_id=destination_country_id,
        weight=weight,
        customer_id=customer_id,
        customer_name=customer_name,
        customer_slug=customer_slug,
    ).normalized()
    attributes = validate(request)

    # Store calls block; keep them off the event loop
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, use_case.generate_or_raise, attributes)

    return TrackingNumberResponse(
        tracking_number=result.tracking_number, created_at=result.created_at
    )
