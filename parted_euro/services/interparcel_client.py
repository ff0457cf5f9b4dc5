"""
Interparcel API Client

Interparcel is a freight broker with no published API. Quoting uses the same
endpoints as its public website:
- /quote/availability lists candidate services for a route (no session needed)
- /quote/quote prices one service and requires a PHP session cookie plus the
  page's CSRF token
- the select-service page is fetched manually to obtain that session
  (see modules/shipping/carriers/interparcel_session.py)

One InterparcelClient is opened per quote request and closed afterwards.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from parted_euro.core.config import settings
from parted_euro.core.exceptions import ProviderError, RouteUnavailableError
from parted_euro.core.http_client import CarrierHTTPClient
from parted_euro.models.shipping import CarrierSession

logger = logging.getLogger(__name__)

CARRIER_NAME = "Interparcel"

AVAILABILITY_PATH = "/quote/availability"
QUOTE_PATH = "/quote/quote"


def format_number(value: float) -> str:
    """Render a number the way the Interparcel website does: 5.0 -> "5", 5.5 -> "5.5"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass
class InterparcelService:
    """A candidate service from the availability endpoint."""
    id: str
    service: str
    type: Optional[str] = None


@dataclass
class InterparcelQuote:
    """The priced result for one service."""
    service_id: str
    carrier: str
    name: str
    sell_price: Any


class InterparcelClient:
    """Interparcel website API client."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = (api_url or settings.INTERPARCEL_API_URL).rstrip("/")
        self._http = CarrierHTTPClient(CARRIER_NAME, transport=transport)

    async def __aenter__(self):
        await self._http.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._http.close()

    async def get_availability(self, params: Dict[str, str]) -> List[InterparcelService]:
        """
        List services available for a route.

        Raises:
            RouteUnavailableError: Interparcel reported the route as unavailable
            ProviderError: Transport failure or malformed response
        """
        data = await self._http.get_json(f"{self.api_url}{AVAILABILITY_PATH}", params=params)

        if not isinstance(data, dict):
            raise ProviderError(
                "Interparcel availability response is not an object",
                carrier=CARRIER_NAME,
                code="MALFORMED_RESPONSE",
            )

        error_message = data.get("errorMessage")
        if error_message:
            logger.info(f"[INTERPARCEL] Route unavailable: {error_message}")
            raise RouteUnavailableError(str(error_message), carrier=CARRIER_NAME)

        services = []
        try:
            for item in data.get("services") or []:
                if item["id"] is None or not isinstance(item["service"], str):
                    raise TypeError(f"bad service entry: {item!r}")
                services.append(
                    InterparcelService(
                        id=str(item["id"]),
                        service=item["service"],
                        type=item.get("type"),
                    )
                )
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderError(
                "Interparcel returned an unexpected availability payload",
                carrier=CARRIER_NAME,
                code="MALFORMED_RESPONSE",
                details={"error": repr(e)},
            )
        return services

    async def get_quote(
        self,
        params: Dict[str, str],
        service_id: str,
        session: CarrierSession,
    ) -> Optional[InterparcelQuote]:
        """
        Price a single service.

        Returns:
            The first priced service, or None when Interparcel answers with a
            non-2xx status or no services

        Raises:
            ProviderError: Transport failure or malformed response
        """
        response = await self._http.get(
            f"{self.api_url}{QUOTE_PATH}",
            params={**params, "service": service_id},
            headers={
                "Cookie": session.cookie_header,
                "x-csrf-token": session.csrf_token,
            },
        )

        if not response.is_success:
            logger.debug(f"[INTERPARCEL] Service {service_id} quote returned {response.status_code}")
            return None

        try:
            data = response.json()
            services = data.get("services")
            if not services:
                return None
            first = services[0]
            return InterparcelQuote(
                service_id=service_id,
                carrier=first["carrier"],
                name=first["name"],
                sell_price=first["sellPrice"],
            )
        except (ValueError, KeyError, TypeError, AttributeError, IndexError) as e:
            raise ProviderError(
                f"Interparcel returned an unexpected quote for service {service_id}",
                carrier=CARRIER_NAME,
                code="MALFORMED_RESPONSE",
                details={"error": repr(e)},
            )

    async def fetch_page(self, url: str, headers: Dict[str, str]) -> httpx.Response:
        """Fetch one website page without following redirects."""
        return await self._http.get(url, headers=headers)
