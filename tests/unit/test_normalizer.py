from decimal import Decimal

import pytest

from parted_euro.core.exceptions import ProviderError
from parted_euro.modules.shipping.normalizer import (
    admin_option,
    make_option,
    pickup_option,
    to_minor_units,
)


@pytest.mark.parametrize(
    "price, expected",
    [
        ("12.34", 1234),
        ("12.341", 1235),
        ("12.3", 1230),
        (12.3, 1230),
        ("0", 0),
        (Decimal("99.999"), 10000),
        (15, 1500),
        (" 7.05 ", 705),
    ],
)
def test_to_minor_units_rounds_up_to_next_cent(price, expected):
    assert to_minor_units(price) == expected


@pytest.mark.parametrize("price", ["", "abc", None, "-1.00", "NaN", "Infinity"])
def test_to_minor_units_rejects_bad_prices(price):
    with pytest.raises(ProviderError) as exc_info:
        to_minor_units(price, carrier="AusPost")
    assert exc_info.value.code == "MALFORMED_RESPONSE"
    assert exc_info.value.carrier == "AusPost"


def test_make_option_uses_configured_currency():
    option = make_option("AusPost Regular", "15.941")
    assert option.display_name == "AusPost Regular"
    assert option.amount_minor_units == 1595
    assert option.currency == "AUD"


def test_synthetic_options():
    pickup = pickup_option()
    admin = admin_option()

    assert pickup.display_name == "Pickup from Parted Euro"
    assert pickup.amount_minor_units == 0
    assert admin.display_name == "Admin Shipping"
    assert admin.amount_minor_units == 1


def test_stripe_rate_shape():
    rate = make_option("Express", "91.20").to_stripe_rate()
    assert rate == {
        "shipping_rate_data": {
            "type": "fixed_amount",
            "display_name": "Express",
            "fixed_amount": {"amount": 9120, "currency": "aud"},
        }
    }
