"""
AusPost Carrier Implementations

Two carriers over the same PAC API:
- AUSPOST_DOMESTIC offers exactly Regular and Express parcel tiers
- AUSPOST_INTERNATIONAL offers the allow-listed international services
  (AUSPOST_INTERNATIONAL_SERVICES), named as AusPost names them

Both wrap AusPostClient and normalize prices to ShippingOption.
"""
import logging
from typing import Dict, List, Optional

import httpx

from parted_euro.core.config import settings
from parted_euro.core.exceptions import MissingServiceError, ProviderError
from parted_euro.models.shipping import CarrierCode, ShippingOption, ShippingRequest
from parted_euro.modules.shipping.carriers import register_carrier
from parted_euro.modules.shipping.carriers.base import BaseCarrier
from parted_euro.modules.shipping.normalizer import make_option
from parted_euro.services.auspost_client import CARRIER_NAME, AusPostClient

logger = logging.getLogger(__name__)

# PAC service code -> checkout display name, in display order
DOMESTIC_SERVICES: Dict[str, str] = {
    "AUS_PARCEL_REGULAR": "AusPost Regular",
    "AUS_PARCEL_EXPRESS": "AusPost Express",
}


class _AusPostCarrier(BaseCarrier):

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(transport)
        self._client: Optional[AusPostClient] = None

    @property
    def carrier_name(self) -> str:
        return CARRIER_NAME

    def _get_client(self) -> AusPostClient:
        if self._client is None:
            self._client = AusPostClient(transport=self._transport)
        return self._client


@register_carrier(CarrierCode.AUSPOST_DOMESTIC)
class AusPostDomesticCarrier(_AusPostCarrier):
    """AusPost domestic parcels from the warehouse postcode."""

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.AUSPOST_DOMESTIC

    async def quote(self, request: ShippingRequest) -> List[ShippingOption]:
        if not request.destination_postcode:
            raise ProviderError(
                "Destination postcode is required for AusPost domestic quotes",
                carrier=CARRIER_NAME,
                code="MISSING_POSTCODE",
            )

        services = await self._get_client().get_domestic_services(
            length=request.length_cm,
            width=request.width_cm,
            height=request.height_cm,
            weight=request.weight_kg,
            from_postcode=settings.SHIPPING_ORIGIN_POSTCODE,
            to_postcode=request.destination_postcode,
        )

        prices = {s.code: s.price for s in services if s.code in DOMESTIC_SERVICES}
        missing = [code for code in DOMESTIC_SERVICES if not prices.get(code)]
        if missing:
            logger.warning(f"[AUSPOST] Domestic quote missing services: {missing}")
            raise MissingServiceError(
                "Shipping not available",
                missing_services=missing,
                carrier=CARRIER_NAME,
            )

        return [
            make_option(display_name, prices[code], CARRIER_NAME)
            for code, display_name in DOMESTIC_SERVICES.items()
        ]


@register_carrier(CarrierCode.AUSPOST_INTERNATIONAL)
class AusPostInternationalCarrier(_AusPostCarrier):
    """AusPost international parcels, filtered to the supported service names."""

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.AUSPOST_INTERNATIONAL

    async def quote(self, request: ShippingRequest) -> List[ShippingOption]:
        services = await self._get_client().get_international_services(
            country_code=request.destination_country,
            weight=request.weight_kg,
        )

        allowed = set(settings.AUSPOST_INTERNATIONAL_SERVICES)
        options = [
            make_option(s.name, s.price, CARRIER_NAME)
            for s in services
            if s.name in allowed
        ]
        logger.info(
            f"[AUSPOST] {len(options)} of {len(services)} international services "
            f"offered for {request.destination_country}"
        )
        return options
