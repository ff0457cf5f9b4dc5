from parted_euro.models.shipping import (
    CarrierCode,
    CarrierSession,
    ShippingCountry,
    ShippingOption,
    ShippingRequest,
)

__all__ = [
    "CarrierCode",
    "CarrierSession",
    "ShippingCountry",
    "ShippingOption",
    "ShippingRequest",
]
