"""
Shipping Quote Service

Aggregates carrier quotes for checkout:
- SelectionPolicy decides which carriers to call for the package and route
- Carrier calls run concurrently; optional calls that fail are logged and
  dropped, required calls that fail abort the quote
- Results are assembled into at most MAX_SHIPPING_OPTIONS options

Usage:
    service = ShippingQuoteService()
    options = await service.get_shipping_services(request, is_admin=False)
"""
import asyncio
import logging
from typing import Dict, List, Optional

import httpx

from parted_euro.core.config import settings
from parted_euro.core.exceptions import NoShippableOptionError, ProviderError, ShippingError
from parted_euro.models.shipping import CarrierCode, ShippingCountry, ShippingOption, ShippingRequest
from parted_euro.modules.shipping.assembler import assemble_options
from parted_euro.modules.shipping.carriers import CarrierFactory
from parted_euro.modules.shipping.carriers.base import BaseCarrier
from parted_euro.modules.shipping.policy import CarrierCall, SelectionPolicy
from parted_euro.services.auspost_client import AusPostClient

logger = logging.getLogger(__name__)


class ShippingQuoteService:
    """
    Service for checkout shipping quotes.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        carriers: Optional[Dict[CarrierCode, BaseCarrier]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        policy: Optional[SelectionPolicy] = None,
    ):
        """
        Args:
            carriers: Carrier instances by code; unset codes come from CarrierFactory
            transport: Optional httpx transport for carriers built here
            policy: Selection policy (defaults to settings thresholds)
        """
        self._carriers: Dict[CarrierCode, BaseCarrier] = dict(carriers or {})
        self._transport = transport
        self.policy = policy or SelectionPolicy()

    def get_carrier_instance(self, carrier_code: CarrierCode) -> BaseCarrier:
        carrier = self._carriers.get(carrier_code)
        if carrier is None:
            carrier = CarrierFactory.get_carrier(carrier_code, self._transport)
            if carrier is None:
                raise ProviderError(
                    f"Carrier {carrier_code.value} is not available",
                    carrier=carrier_code.value,
                    code="CARRIER_NOT_REGISTERED",
                )
            self._carriers[carrier_code] = carrier
        return carrier

    async def _run_call(self, call: CarrierCall, request: ShippingRequest) -> List[ShippingOption]:
        code = call.carrier_code.value
        try:
            carrier = self.get_carrier_instance(call.carrier_code)
            options = await carrier.quote(request)
            logger.info(f"[SHIPPING] Got {len(options)} options from {code}")
            return options
        except ShippingError as e:
            if call.required:
                logger.warning(f"[SHIPPING] Required carrier {code} failed: {e.code} {e.message}")
                raise
            logger.error(f"[SHIPPING] Optional carrier {code} failed, continuing without it: {e.code} {e.message}")
            return []

    async def get_shipping_services(
        self,
        request: ShippingRequest,
        is_admin: bool = False,
    ) -> List[ShippingOption]:
        """
        Quote every carrier chosen by the selection policy.

        Args:
            request: Package and destination
            is_admin: Prepend the admin override option

        Returns:
            Between 1 and MAX_SHIPPING_OPTIONS options

        Raises:
            ShippingError: A required carrier failed (propagated unchanged)
            NoShippableOptionError: Nothing is left to offer
        """
        decision = self.policy.decide(request)
        logger.info(
            f"[SHIPPING] Quote {request.weight_kg}kg to {request.destination_country} "
            f"via {decision.branch}"
        )

        results = await asyncio.gather(
            *(self._run_call(call, request) for call in decision.calls),
            return_exceptions=True,
        )

        carrier_options: List[ShippingOption] = []
        for result in results:
            if isinstance(result, BaseException):
                raise result
            carrier_options.extend(result)

        options = assemble_options(
            carrier_options,
            include_pickup=decision.include_pickup,
            is_admin=is_admin,
            max_options=settings.MAX_SHIPPING_OPTIONS,
        )

        if not options:
            raise NoShippableOptionError(
                "Unable to ship this item to the destination country",
                details={"destination": request.destination_country, "branch": decision.branch},
            )

        return options

    async def get_shipping_countries(self) -> List[ShippingCountry]:
        """
        Destination countries for the checkout country picker.

        Priority countries (PRIORITY_COUNTRIES) come first in their configured
        order; the rest follow alphabetically by name.
        """
        countries = await AusPostClient(transport=self._transport).get_countries()

        priority = {code: index for index, code in enumerate(settings.PRIORITY_COUNTRIES)}
        ordered = sorted(
            countries,
            key=lambda c: (0, priority[c.code], "") if c.code in priority else (1, 0, c.name.lower()),
        )
        return [ShippingCountry(code=c.code, name=c.name) for c in ordered]


_service: Optional[ShippingQuoteService] = None


def get_shipping_quote_service() -> ShippingQuoteService:
    """FastAPI dependency returning the shared service instance."""
    global _service
    if _service is None:
        _service = ShippingQuoteService()
    return _service
