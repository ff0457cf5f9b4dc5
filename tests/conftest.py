"""
Pytest configuration and fixtures for Parted Euro shipping tests.
"""
import os
import pytest
from typing import Callable, Dict

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["AUSPOST_API_KEY"] = "test-auspost-key"
os.environ["ADMIN_API_TOKEN"] = "test-admin-token-for-unit-tests-only"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEBUG"] = "false"

from parted_euro.core.exceptions import ProviderError  # noqa: E402
from parted_euro.models.shipping import (  # noqa: E402
    CarrierCode,
    ShippingOption,
    ShippingRequest,
)
from tests.fakes import FakeCarrier  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_request() -> Callable[..., ShippingRequest]:
    """Factory for ShippingRequest with a small domestic parcel by default."""
    def _make(**overrides) -> ShippingRequest:
        values = {
            "weight_kg": 5,
            "length_cm": 50,
            "width_cm": 40,
            "height_cm": 30,
            "destination_country": "AU",
            "destination_postcode": "3000",
            "destination_city": "Melbourne",
            "destination_state": "VIC",
        }
        values.update(overrides)
        return ShippingRequest(**values)
    return _make


@pytest.fixture
def fake_carriers() -> Dict[CarrierCode, FakeCarrier]:
    """All three carriers answering successfully."""
    return {
        CarrierCode.AUSPOST_DOMESTIC: FakeCarrier(
            CarrierCode.AUSPOST_DOMESTIC,
            options=[
                ShippingOption("AusPost Regular", 1595),
                ShippingOption("AusPost Express", 2450),
            ],
        ),
        CarrierCode.AUSPOST_INTERNATIONAL: FakeCarrier(
            CarrierCode.AUSPOST_INTERNATIONAL,
            options=[
                ShippingOption("Standard", 6530),
                ShippingOption("Express", 9120),
            ],
        ),
        CarrierCode.INTERPARCEL: FakeCarrier(
            CarrierCode.INTERPARCEL,
            options=[
                ShippingOption("TNT - Road Express", 4210),
                ShippingOption("Couriers Please - Parcel", 3890),
            ],
        ),
    }


@pytest.fixture
def unreachable_error() -> ProviderError:
    return ProviderError(
        "Network error contacting Interparcel: connection refused",
        carrier="Interparcel",
        code="NETWORK_ERROR",
    )
