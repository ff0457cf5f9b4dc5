"""
Quote Normalizer

Converts carrier prices into ShippingOption records. Prices are always
rounded up to the next cent so a quote never undercharges the carrier cost.
"""
from decimal import Decimal, InvalidOperation, ROUND_CEILING
from typing import Optional, Union

from parted_euro.core.config import settings
from parted_euro.core.exceptions import ProviderError
from parted_euro.models.shipping import ShippingOption


def to_minor_units(price: Union[str, int, float, Decimal], carrier: Optional[str] = None) -> int:
    """
    Convert a decimal price (dollars) to integer cents, rounding up.

    "12.341" -> 1235, 12.3 -> 1230, "0" -> 0

    Raises:
        ProviderError: If the price is missing, not numeric, or negative
    """
    try:
        amount = Decimal(str(price).strip())
    except (InvalidOperation, ValueError):
        raise ProviderError(
            f"Unparseable price {price!r}",
            carrier=carrier,
            code="MALFORMED_RESPONSE",
        )

    if not amount.is_finite() or amount < 0:
        raise ProviderError(
            f"Invalid price {price!r}",
            carrier=carrier,
            code="MALFORMED_RESPONSE",
        )

    cents = (amount * 100).to_integral_value(rounding=ROUND_CEILING)
    return int(cents)


def make_option(
    display_name: str,
    price: Union[str, int, float, Decimal],
    carrier: Optional[str] = None,
) -> ShippingOption:
    """Build a ShippingOption from a carrier price in dollars."""
    return ShippingOption(
        display_name=display_name,
        amount_minor_units=to_minor_units(price, carrier),
        currency=settings.SHIPPING_CURRENCY,
    )


def pickup_option() -> ShippingOption:
    """Free pickup from the warehouse (domestic orders only)."""
    return ShippingOption(
        display_name=settings.PICKUP_DISPLAY_NAME,
        amount_minor_units=0,
        currency=settings.SHIPPING_CURRENCY,
    )


def admin_option() -> ShippingOption:
    """Staff override priced at the smallest nonzero amount."""
    return ShippingOption(
        display_name=settings.ADMIN_SHIPPING_DISPLAY_NAME,
        amount_minor_units=1,
        currency=settings.SHIPPING_CURRENCY,
    )
