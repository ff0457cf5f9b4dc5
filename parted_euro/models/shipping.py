"""
Shipping value types shared by carrier clients, the quote policy and the API.

All types are immutable; nothing here survives beyond a single quote request.
"""
import enum
from dataclasses import dataclass, field
from typing import Dict, Tuple, Optional


class CarrierCode(str, enum.Enum):
    """
    Supported carrier-rate providers.

    AusPost is split in two because the domestic and international PAC
    endpoints take different inputs and return different service sets.
    """
    AUSPOST_DOMESTIC = "AUSPOST_DOMESTIC"
    AUSPOST_INTERNATIONAL = "AUSPOST_INTERNATIONAL"
    INTERPARCEL = "INTERPARCEL"


@dataclass(frozen=True)
class ShippingRequest:
    """Package and destination for a single quote request."""
    weight_kg: float
    length_cm: float
    width_cm: float
    height_cm: float
    destination_country: str  # ISO 3166 alpha-2, upper case
    destination_postcode: Optional[str] = None
    destination_city: Optional[str] = None
    destination_state: Optional[str] = None
    is_b2b: bool = False

    @property
    def dimensions(self) -> Tuple[float, float, float]:
        return (self.length_cm, self.width_cm, self.height_cm)


@dataclass(frozen=True)
class ShippingOption:
    """
    A priced shipping option.

    amount_minor_units is in cents and always rounded up from the carrier
    price. Two options are the same option when their display names match.
    """
    display_name: str
    amount_minor_units: int = field(compare=False)
    currency: str = field(default="AUD", compare=False)

    def to_stripe_rate(self) -> Dict:
        """Shape consumed by the checkout as a Stripe shipping option."""
        return {
            "shipping_rate_data": {
                "type": "fixed_amount",
                "display_name": self.display_name,
                "fixed_amount": {
                    "amount": self.amount_minor_units,
                    "currency": self.currency.lower(),
                },
            }
        }


@dataclass(frozen=True)
class CarrierSession:
    """Freight-broker session harvested for one quote request. Never reused."""
    cookies: Dict[str, str]
    csrf_token: str

    @property
    def cookie_header(self) -> str:
        return "; ".join(f"{name}={value}" for name, value in self.cookies.items())


@dataclass(frozen=True)
class ShippingCountry:
    """A destination country offered at checkout."""
    code: str
    name: str
