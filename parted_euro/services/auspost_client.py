"""
AusPost PAC API Client

Implements the Postage Assessment Calculator endpoints used for quoting:
- Domestic parcel services
- International parcel services
- Destination country list

Authentication is a static API key sent in the AUTH-KEY header. All failures
(transport, timeout, non-2xx, malformed payload) surface as ProviderError.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from parted_euro.core.config import settings
from parted_euro.core.exceptions import ProviderError
from parted_euro.core.http_client import CarrierHTTPClient

logger = logging.getLogger(__name__)

CARRIER_NAME = "AusPost"

# API endpoints
DOMESTIC_SERVICES_PATH = "/postage/parcel/domestic/service.json"
INTERNATIONAL_SERVICES_PATH = "/postage/parcel/international/service.json"
COUNTRIES_PATH = "/postage/country.json"


@dataclass
class AusPostService:
    """One service tier from a PAC services response."""
    code: str
    name: str
    price: str
    max_extra_cover: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AusPostService":
        return cls(
            code=data["code"],
            name=data["name"],
            price=str(data["price"]),
            max_extra_cover=data.get("max_extra_cover"),
        )


@dataclass
class AusPostCountry:
    """A destination country accepted by AusPost."""
    code: str
    name: str


def _as_list(value: Any) -> List[Any]:
    # PAC collapses single-element arrays into a bare object
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class AusPostClient:
    """
    AusPost PAC API client.

    Each call opens its own CarrierHTTPClient so nothing is shared between
    quote requests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.AUSPOST_API_KEY
        self.base_url = (base_url or settings.AUSPOST_BASE_URL).rstrip("/")
        self._transport = transport

    def _http(self) -> CarrierHTTPClient:
        return CarrierHTTPClient(
            CARRIER_NAME,
            default_headers={"AUTH-KEY": self.api_key},
            transport=self._transport,
        )

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        async with self._http() as client:
            return await client.get_json(f"{self.base_url}{path}", params=params)

    def _parse_services(self, data: Any) -> List[AusPostService]:
        try:
            raw = data["services"]["service"]
            return [AusPostService.from_api(item) for item in _as_list(raw)]
        except (KeyError, TypeError) as e:
            raise ProviderError(
                "AusPost returned an unexpected services payload",
                carrier=CARRIER_NAME,
                code="MALFORMED_RESPONSE",
                details={"error": repr(e)},
            )

    async def get_domestic_services(
        self,
        length: float,
        width: float,
        height: float,
        weight: float,
        from_postcode: str,
        to_postcode: str,
    ) -> List[AusPostService]:
        """
        Get available domestic parcel services.

        Args:
            length, width, height: Package dimensions in cm
            weight: Package weight in kg
            from_postcode: Origin postcode
            to_postcode: Destination postcode

        Returns:
            Services in provider order
        """
        params = {
            "length": length,
            "width": width,
            "height": height,
            "weight": weight,
            "from_postcode": from_postcode,
            "to_postcode": to_postcode,
        }
        logger.info(f"[AUSPOST] Domestic services {from_postcode} -> {to_postcode}, {weight}kg")
        data = await self._get(DOMESTIC_SERVICES_PATH, params)
        return self._parse_services(data)

    async def get_international_services(self, country_code: str, weight: float) -> List[AusPostService]:
        """Get available international parcel services for a destination country."""
        params = {"country_code": country_code, "weight": weight}
        logger.info(f"[AUSPOST] International services -> {country_code}, {weight}kg")
        data = await self._get(INTERNATIONAL_SERVICES_PATH, params)
        return self._parse_services(data)

    async def get_countries(self) -> List[AusPostCountry]:
        """Get every destination country AusPost ships to, in provider order."""
        data = await self._get(COUNTRIES_PATH)

        try:
            raw = data["countries"]["country"]
            return [AusPostCountry(code=c["code"], name=c["name"]) for c in _as_list(raw)]
        except (KeyError, TypeError) as e:
            logger.error(f"[AUSPOST] Country list parse failed: {e}")
            raise ProviderError(
                "AusPost returned an unexpected country payload",
                carrier=CARRIER_NAME,
                code="MALFORMED_RESPONSE",
            )
