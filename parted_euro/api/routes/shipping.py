"""
Shipping API Routes

Provides endpoints for:
- Quoting (shipping options for a package and destination)
- Destination countries for the checkout country picker
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from parted_euro.api.deps import get_is_admin
from parted_euro.core.config import settings
from parted_euro.core.error_handler import shipping_error_body
from parted_euro.core.exceptions import ShippingError
from parted_euro.core.rate_limit import limiter
from parted_euro.schemas.shipping import (
    ShippingCountryResponse,
    ShippingServicesRequest,
    StripeShippingOption,
    to_stripe_options,
)
from parted_euro.services.shipping_quote_service import (
    ShippingQuoteService,
    get_shipping_quote_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post("/services", response_model=List[StripeShippingOption])
@limiter.limit(settings.RATE_LIMIT_SHIPPING)
async def get_shipping_services(
    request: Request,
    services_request: ShippingServicesRequest,
    is_admin: bool = Depends(get_is_admin),
    quote_service: ShippingQuoteService = Depends(get_shipping_quote_service),
):
    """
    Get shipping options for a package.

    Returns up to four options in display order. Staff presenting a valid
    X-Admin-Token also get the "Admin Shipping" override first.
    """
    try:
        options = await quote_service.get_shipping_services(
            services_request.to_request(),
            is_admin=is_admin,
        )
    except ShippingError as e:
        logger.warning(f"[SHIPPING] Quote failed: {e!r}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=shipping_error_body(e))

    return to_stripe_options(options)


@router.get("/countries", response_model=List[ShippingCountryResponse])
async def get_shipping_countries(
    quote_service: ShippingQuoteService = Depends(get_shipping_quote_service),
):
    """Countries AusPost ships to, priority markets first."""
    try:
        countries = await quote_service.get_shipping_countries()
    except ShippingError as e:
        logger.error(f"[SHIPPING] Country list failed: {e!r}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=shipping_error_body(e))

    return [ShippingCountryResponse.from_country(c) for c in countries]
