"""
Shipping Schemas

Pydantic models for the shipping quote API. Responses use the Stripe
shipping_rate_data shape so the storefront can pass them to checkout as-is.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from parted_euro.models.shipping import ShippingCountry, ShippingOption, ShippingRequest


# ==================== Request Schemas ====================


class ShippingServicesRequest(BaseModel):
    """Package and destination to quote. Dimensions in cm, weight in kg."""
    weight: float = Field(..., gt=0)
    length: float = Field(..., gt=0)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    destination_country: str = Field(..., min_length=2, max_length=2)
    destination_postcode: Optional[str] = Field(None, max_length=20)
    destination_city: Optional[str] = Field(None, max_length=100)
    destination_state: Optional[str] = Field(None, max_length=50)
    b2b: bool = False

    @field_validator("destination_country")
    @classmethod
    def validate_country_code(cls, v):
        return v.upper()

    def to_request(self) -> ShippingRequest:
        return ShippingRequest(
            weight_kg=self.weight,
            length_cm=self.length,
            width_cm=self.width,
            height_cm=self.height,
            destination_country=self.destination_country,
            destination_postcode=self.destination_postcode,
            destination_city=self.destination_city,
            destination_state=self.destination_state,
            is_b2b=self.b2b,
        )


# ==================== Response Schemas ====================


class FixedAmount(BaseModel):
    amount: int = Field(..., description="Minor units (cents)")
    currency: str = Field(..., description="Lower-case ISO 4217 code")


class ShippingRateData(BaseModel):
    type: str = "fixed_amount"
    display_name: str
    fixed_amount: FixedAmount


class StripeShippingOption(BaseModel):
    """One shipping option, ready for Stripe's shipping_options."""
    shipping_rate_data: ShippingRateData

    @classmethod
    def from_option(cls, option: ShippingOption) -> "StripeShippingOption":
        return cls.model_validate(option.to_stripe_rate())


class ShippingCountryResponse(BaseModel):
    code: str
    name: str

    @classmethod
    def from_country(cls, country: ShippingCountry) -> "ShippingCountryResponse":
        return cls(code=country.code, name=country.name)


def to_stripe_options(options: List[ShippingOption]) -> List[StripeShippingOption]:
    return [StripeShippingOption.from_option(o) for o in options]
