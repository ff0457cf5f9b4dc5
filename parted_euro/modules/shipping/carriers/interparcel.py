"""
Interparcel Carrier Implementation

Freight-broker quoting for heavy or oversized items:
1. Availability lists candidate services for the route
2. A website session (cookie + CSRF token) is bootstrapped
3. Every eligible service is priced concurrently; failed or empty quotes are
   dropped and the rest kept in provider order
4. At most INTERPARCEL_MAX_OPTIONS options are returned
"""
import asyncio
import logging
from typing import Dict, List, Optional

from parted_euro.core.config import settings
from parted_euro.core.exceptions import NoServicesAvailableError
from parted_euro.models.shipping import CarrierCode, CarrierSession, ShippingOption, ShippingRequest
from parted_euro.modules.shipping.carriers import register_carrier
from parted_euro.modules.shipping.carriers.base import BaseCarrier
from parted_euro.modules.shipping.carriers.interparcel_session import establish_session
from parted_euro.modules.shipping.normalizer import make_option
from parted_euro.services.interparcel_client import (
    CARRIER_NAME,
    InterparcelClient,
    InterparcelService,
    format_number,
)

logger = logging.getLogger(__name__)

# Extra packaging allowance for palletised freight (cm)
PALLET_PADDING_CM = (30, 30, 10)


def build_quote_params(request: ShippingRequest) -> Dict[str, str]:
    """
    Query parameters shared by the availability and per-service quote calls.

    Items heavier than the pallet threshold are quoted with padded dimensions.
    The package type is not included; see build_availability_params().
    """
    length, width, height = request.dimensions
    if request.weight_kg > settings.PALLET_WEIGHT_THRESHOLD_KG:
        pad_l, pad_w, pad_h = PALLET_PADDING_CM
        length, width, height = length + pad_l, width + pad_w, height + pad_h

    return {
        "pkg[0][0]": format_number(request.weight_kg),
        "pkg[0][1]": format_number(length),
        "pkg[0][2]": format_number(width),
        "pkg[0][3]": format_number(height),
        "source": "booking",
        "coll_country": settings.SHIPPING_ORIGIN_COUNTRY_NAME,
        "coll_state": settings.SHIPPING_ORIGIN_STATE,
        "coll_city": settings.SHIPPING_ORIGIN_CITY,
        "coll_postcode": settings.SHIPPING_ORIGIN_POSTCODE,
        "del_postcode": request.destination_postcode or "",
        "del_city": request.destination_city or "",
        "del_state": request.destination_state or "",
        "del_country": request.destination_country,
    }


def build_availability_params(request: ShippingRequest) -> Dict[str, str]:
    params = build_quote_params(request)
    params["type"] = "pallet" if request.weight_kg >= settings.PALLET_WEIGHT_THRESHOLD_KG else "parcel"
    return params


def is_eligible(service: InterparcelService, is_b2b: bool) -> bool:
    """Drop deny-listed carriers, and business-only services for retail customers."""
    if any(excluded in service.service for excluded in settings.INTERPARCEL_EXCLUDED_CARRIERS):
        return False
    if not is_b2b and "b2b" in service.service.lower():
        return False
    return True


@register_carrier(CarrierCode.INTERPARCEL)
class InterparcelCarrier(BaseCarrier):
    """Interparcel freight broker."""

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.INTERPARCEL

    @property
    def carrier_name(self) -> str:
        return CARRIER_NAME

    async def quote(self, request: ShippingRequest) -> List[ShippingOption]:
        async with InterparcelClient(transport=self._transport) as client:
            services = await client.get_availability(build_availability_params(request))
            session = await establish_session(client, request)

            eligible = [s for s in services if is_eligible(s, request.is_b2b)]
            params = build_quote_params(request)
            logger.info(
                f"[INTERPARCEL] Pricing {len(eligible)} of {len(services)} services "
                f"to {request.destination_country}"
            )

            results = await asyncio.gather(
                *(self._quote_service(client, params, s, session) for s in eligible)
            )

        options = [option for option in results if option is not None]
        if not options:
            raise NoServicesAvailableError(
                "Unable to ship this item to the destination country",
                carrier=CARRIER_NAME,
                details={"destination": request.destination_country},
            )

        return options[:settings.INTERPARCEL_MAX_OPTIONS]

    async def _quote_service(
        self,
        client: InterparcelClient,
        params: Dict[str, str],
        service: InterparcelService,
        session: CarrierSession,
    ) -> Optional[ShippingOption]:
        """Price one service. Any failure drops the service rather than the whole quote."""
        try:
            quote = await client.get_quote(params, service.id, session)
            if quote is None:
                return None
            return make_option(f"{quote.carrier} - {quote.name}", quote.sell_price, CARRIER_NAME)
        except Exception as e:
            logger.warning(f"[INTERPARCEL] Service {service.id} ({service.service}) dropped: {e}")
            return None
