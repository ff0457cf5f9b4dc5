from typing import Dict, List, Optional

import httpx
import pytest

from parted_euro.core.exceptions import (
    NoServicesAvailableError,
    ProviderError,
    RouteUnavailableError,
    SessionError,
)
from parted_euro.modules.shipping.carriers.interparcel import (
    InterparcelCarrier,
    build_availability_params,
    build_quote_params,
)
from parted_euro.services.shipping_quote_service import ShippingQuoteService

QUOTE_PAGE = '<html><head><meta name="csrf-token" content="csrf-abc"></head></html>'


class FakeInterparcel:
    """Fake au.interparcel.com: availability, select-service page and per-service quotes."""

    def __init__(
        self,
        services: List[Dict],
        quotes: Dict[str, object],
        error_message: str = "",
        page_cookie: Optional[str] = "PHPSESSID=sess-9",
    ):
        self.services = services
        self.quotes = quotes
        self.error_message = error_message
        self.page_cookie = page_cookie
        self.requests: List[httpx.Request] = []

    def quote_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/quote/quote"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/quote/availability":
            return httpx.Response(200, json={
                "status": 0 if self.error_message else 1,
                "errorMessage": self.error_message,
                "services": self.services,
                "invalidServices": [],
            })

        if path == "/quote/select-service":
            headers = {"Set-Cookie": f"{self.page_cookie}; path=/"} if self.page_cookie else {}
            return httpx.Response(200, text=QUOTE_PAGE, headers=headers)

        if path == "/api/quote/quote":
            quote = self.quotes.get(request.url.params["service"])
            if isinstance(quote, Exception):
                raise quote
            if isinstance(quote, int):
                return httpx.Response(quote, json={"error": "nope"})
            if quote is None:
                return httpx.Response(200, json={"status": 1, "services": []})
            return httpx.Response(200, json={"status": 1, "services": [quote]})

        return httpx.Response(404)

    def carrier(self) -> InterparcelCarrier:
        return InterparcelCarrier(transport=httpx.MockTransport(self.handler))


def _service(id_, name):
    return {"id": id_, "service": name, "type": "parcel"}


def _quote(carrier, name, price):
    return {"carrier": carrier, "name": name, "sellPrice": price}


@pytest.mark.asyncio
async def test_quotes_eligible_services_in_provider_order(make_request):
    site = FakeInterparcel(
        services=[
            _service("1", "TNT Road Express"),
            _service("2", "Hunter Express Road"),
            _service("3", "Couriers Please B2B"),
            _service("4", "Couriers Please Parcel"),
        ],
        quotes={
            "1": _quote("TNT", "Road Express", 42.101),
            "4": _quote("Couriers Please", "Parcel", "38.90"),
        },
    )

    options = await site.carrier().quote(make_request())

    assert [(o.display_name, o.amount_minor_units) for o in options] == [
        ("TNT - Road Express", 4211),
        ("Couriers Please - Parcel", 3890),
    ]
    quoted = sorted(r.url.params["service"] for r in site.quote_requests())
    assert quoted == ["1", "4"]


@pytest.mark.asyncio
async def test_b2b_services_offered_to_business_customers(make_request):
    site = FakeInterparcel(
        services=[_service("3", "Couriers Please B2B"), _service("2", "Hunter Express")],
        quotes={"3": _quote("Couriers Please", "B2B", 20)},
    )

    options = await site.carrier().quote(make_request(is_b2b=True))

    assert [o.display_name for o in options] == ["Couriers Please - B2B"]
    assert [r.url.params["service"] for r in site.quote_requests()] == ["3"]


@pytest.mark.asyncio
async def test_quote_requests_carry_session_and_no_package_type(make_request):
    site = FakeInterparcel(
        services=[_service("1", "TNT Road Express")],
        quotes={"1": _quote("TNT", "Road Express", 10)},
    )

    await site.carrier().quote(make_request())

    availability = site.requests[0]
    assert availability.url.path == "/api/quote/availability"
    assert availability.url.params["type"] == "parcel"

    quote_request = site.quote_requests()[0]
    assert quote_request.headers["Cookie"] == "PHPSESSID=sess-9"
    assert quote_request.headers["x-csrf-token"] == "csrf-abc"
    assert "type" not in quote_request.url.params
    assert quote_request.url.params["del_postcode"] == "3000"


@pytest.mark.asyncio
async def test_failed_services_are_dropped(make_request):
    site = FakeInterparcel(
        services=[_service(str(i), f"Service {i}") for i in range(1, 6)],
        quotes={
            "1": 500,
            "2": httpx.ConnectError("reset"),
            "3": None,
            "4": _quote("Allied", "Express", 99),
            "5": {"carrier": "Broken"},
        },
    )

    options = await site.carrier().quote(make_request())

    assert [o.display_name for o in options] == ["Allied - Express"]


@pytest.mark.asyncio
async def test_all_services_failing_raises(make_request):
    site = FakeInterparcel(
        services=[_service("1", "TNT Road Express"), _service("2", "Aramex")],
        quotes={"1": 503, "2": None},
    )

    with pytest.raises(NoServicesAvailableError) as exc_info:
        await site.carrier().quote(make_request())

    assert exc_info.value.message == "Unable to ship this item to the destination country"


@pytest.mark.asyncio
async def test_at_most_four_options(make_request):
    site = FakeInterparcel(
        services=[_service(str(i), f"Service {i}") for i in range(1, 8)],
        quotes={str(i): _quote("Carrier", f"Service {i}", i) for i in range(1, 8)},
    )

    options = await site.carrier().quote(make_request())

    assert [o.display_name for o in options] == [f"Carrier - Service {i}" for i in range(1, 5)]


@pytest.mark.asyncio
async def test_route_unavailable(make_request):
    site = FakeInterparcel(services=[], quotes={}, error_message="Destination postcode not serviced")

    with pytest.raises(RouteUnavailableError) as exc_info:
        await site.carrier().quote(make_request())

    assert exc_info.value.message == "Destination postcode not serviced"
    assert all(r.url.path == "/api/quote/availability" for r in site.requests)


@pytest.mark.asyncio
async def test_session_failure_aborts_quote(make_request):
    site = FakeInterparcel(
        services=[_service("1", "TNT Road Express")],
        quotes={"1": _quote("TNT", "Road Express", 10)},
        page_cookie=None,
    )

    with pytest.raises(SessionError):
        await site.carrier().quote(make_request())

    assert site.quote_requests() == []


@pytest.mark.asyncio
async def test_unreachable_api_is_provider_error(make_request):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    carrier = InterparcelCarrier(transport=httpx.MockTransport(handler))

    with pytest.raises(ProviderError) as exc_info:
        await carrier.quote(make_request(weight_kg=25))

    assert exc_info.value.code == "NETWORK_ERROR"


@pytest.mark.parametrize(
    "weight, expected_dims, expected_type",
    [
        (30, ("100", "50", "40"), "parcel"),
        (35, ("100", "50", "40"), "pallet"),
        (35.5, ("130", "80", "50"), "pallet"),
    ],
)
def test_pallet_padding_and_type(make_request, weight, expected_dims, expected_type):
    request = make_request(weight_kg=weight, length_cm=100, width_cm=50, height_cm=40)

    params = build_quote_params(request)
    availability = build_availability_params(request)

    assert (params["pkg[0][1]"], params["pkg[0][2]"], params["pkg[0][3]"]) == expected_dims
    assert "type" not in params
    assert availability["type"] == expected_type
    assert params["coll_postcode"] == "3180"
    assert params["coll_country"] == "Australia"
    assert params["source"] == "booking"


def test_missing_destination_fields_are_blank(make_request):
    params = build_quote_params(make_request(
        destination_country="US",
        destination_postcode=None,
        destination_city=None,
        destination_state=None,
    ))

    assert params["del_postcode"] == ""
    assert params["del_city"] == ""
    assert params["del_state"] == ""
    assert params["del_country"] == "US"


@pytest.mark.parametrize("bad_entry", [{"id": 7, "service": None}, {"id": 7, "service": 12}, {"id": None, "service": "TNT"}])
@pytest.mark.asyncio
async def test_malformed_availability_entry_is_provider_error(make_request, bad_entry):
    site = FakeInterparcel(services=[bad_entry], quotes={})

    with pytest.raises(ProviderError) as exc_info:
        await site.carrier().quote(make_request())

    assert exc_info.value.code == "MALFORMED_RESPONSE"
    assert site.quote_requests() == []


@pytest.mark.asyncio
async def test_malformed_availability_does_not_break_domestic_quote(make_request):
    site = FakeInterparcel(services=[{"id": 7, "service": None}], quotes={})
    auspost_body = {
        "services": {
            "service": [
                {"code": "AUS_PARCEL_REGULAR", "name": "Parcel Post", "price": "15.95"},
                {"code": "AUS_PARCEL_EXPRESS", "name": "Express Post", "price": "24.50"},
            ]
        }
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/postage/parcel/domestic/service.json":
            return httpx.Response(200, json=auspost_body)
        return site.handler(request)

    service = ShippingQuoteService(transport=httpx.MockTransport(handler))

    options = await service.get_shipping_services(make_request())

    assert [o.display_name for o in options] == [
        "Pickup from Parted Euro",
        "AusPost Regular",
        "AusPost Express",
    ]
