"""
Shipping Selection Policy

Decides which carriers to call for a request, whether each call may fail
without aborting the quote, and whether warehouse pickup is offered.
First matching branch wins:

| Branch                 | Condition                  | Calls                                   | Pickup |
|------------------------|----------------------------|-----------------------------------------|--------|
| heavy_freight          | weight >= 20               | Interparcel (required iff international) | domestic |
| international_parcel   | intl, every dim < 105      | AusPost intl (required)                 | no     |
| international_freight  | intl, any dim >= 105       | Interparcel (required)                  | no     |
| domestic_parcel        | domestic, every dim < 105  | AusPost domestic, Interparcel (optional) | yes   |
| domestic_freight       | domestic, any dim >= 105   | Interparcel (optional)                  | yes    |

Domestic freight failures fall back to pickup only; international failures
surface to the customer.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from parted_euro.core.config import settings
from parted_euro.models.shipping import CarrierCode, ShippingRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarrierCall:
    """One carrier to query. A required call's failure aborts the whole quote."""
    carrier_code: CarrierCode
    required: bool = False


@dataclass(frozen=True)
class SelectionDecision:
    branch: str
    calls: List[CarrierCall] = field(default_factory=list)
    include_pickup: bool = False

    @property
    def carrier_codes(self) -> List[CarrierCode]:
        return [call.carrier_code for call in self.calls]


class SelectionPolicy:
    """Carrier selection rules, with thresholds taken from settings unless overridden."""

    def __init__(
        self,
        heavy_weight_kg: Optional[float] = None,
        dimension_limit_cm: Optional[float] = None,
        domestic_country: Optional[str] = None,
    ):
        self.heavy_weight_kg = (
            heavy_weight_kg if heavy_weight_kg is not None else settings.HEAVY_WEIGHT_THRESHOLD_KG
        )
        self.dimension_limit_cm = (
            dimension_limit_cm if dimension_limit_cm is not None else settings.PARCEL_DIMENSION_LIMIT_CM
        )
        self.domestic_country = (domestic_country or settings.DOMESTIC_COUNTRY_CODE).upper()

    def is_domestic(self, request: ShippingRequest) -> bool:
        return request.destination_country.upper() == self.domestic_country

    def fits_parcel(self, request: ShippingRequest) -> bool:
        return all(d < self.dimension_limit_cm for d in request.dimensions)

    def decide(self, request: ShippingRequest) -> SelectionDecision:
        domestic = self.is_domestic(request)

        if request.weight_kg >= self.heavy_weight_kg:
            decision = SelectionDecision(
                branch="heavy_freight",
                calls=[CarrierCall(CarrierCode.INTERPARCEL, required=not domestic)],
                include_pickup=domestic,
            )
        elif not domestic and self.fits_parcel(request):
            decision = SelectionDecision(
                branch="international_parcel",
                calls=[CarrierCall(CarrierCode.AUSPOST_INTERNATIONAL, required=True)],
            )
        elif not domestic:
            decision = SelectionDecision(
                branch="international_freight",
                calls=[CarrierCall(CarrierCode.INTERPARCEL, required=True)],
            )
        elif self.fits_parcel(request):
            decision = SelectionDecision(
                branch="domestic_parcel",
                calls=[
                    CarrierCall(CarrierCode.AUSPOST_DOMESTIC),
                    CarrierCall(CarrierCode.INTERPARCEL),
                ],
                include_pickup=True,
            )
        else:
            decision = SelectionDecision(
                branch="domestic_freight",
                calls=[CarrierCall(CarrierCode.INTERPARCEL)],
                include_pickup=True,
            )

        logger.debug(
            f"[SHIPPING] {decision.branch}: {request.weight_kg}kg {request.dimensions} "
            f"-> {request.destination_country}, calls={[c.carrier_code.value for c in decision.calls]}"
        )
        return decision
