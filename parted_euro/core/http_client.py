"""
HTTP Client for Carrier Rate APIs

Thin async wrapper over httpx used by every carrier client:
- One attempt per call. Carrier quotes are never retried; a failed optional
  carrier is dropped and a failed required carrier propagates once.
- Bounded per-call timeout (CARRIER_TIMEOUT_SECONDS)
- Timeouts, transport failures, non-2xx statuses and undecodable JSON all
  surface as ProviderError so callers apply a single fault-tolerance rule
- Cookies are never persisted between calls. Callers that need a session
  build the Cookie header themselves.

Usage:
    async with CarrierHTTPClient("AusPost", headers={"AUTH-KEY": key}) as client:
        data = await client.get_json("https://digitalapi.auspost.com.au/postage/country.json")
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from parted_euro.core.config import settings
from parted_euro.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


class CarrierHTTPClient:
    """
    Async HTTP client for a single carrier.

    Opened per quote request and closed afterwards, so no connection or
    cookie state outlives the request that created it.
    """

    def __init__(
        self,
        carrier_name: str,
        timeout: Optional[float] = None,
        default_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.carrier_name = carrier_name
        self.timeout = timeout if timeout is not None else settings.CARRIER_TIMEOUT_SECONDS
        self.default_headers = default_headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        return await self.init()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def init(self):
        """Initialize client without context manager. Must call close() when done."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.default_headers,
                follow_redirects=False,
                transport=self._transport,
            )
        return self

    async def close(self):
        """Close the client. Use this when not using context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_host(self, url: str) -> str:
        return urlparse(url).netloc

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Make a single HTTP request.

        Returns the response whatever its status; redirects are not followed.

        Raises:
            ProviderError: On timeout or transport failure
        """
        if not self._client:
            await self.init()

        host = self._get_host(url)
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"[HTTP] {self.carrier_name} {host}: timed out after {self.timeout}s")
            raise ProviderError(
                f"{self.carrier_name} request timed out",
                carrier=self.carrier_name,
                code="TIMEOUT",
                details={"url": url, "error": str(e)},
            )
        except httpx.RequestError as e:
            logger.warning(f"[HTTP] {self.carrier_name} {host}: request failed: {e}")
            raise ProviderError(
                f"Network error contacting {self.carrier_name}: {e}",
                carrier=self.carrier_name,
                code="NETWORK_ERROR",
                details={"url": url},
            )
        finally:
            # Set-Cookie handling is explicit; never let httpx replay cookies
            if self._client is not None:
                self._client.cookies.clear()

        logger.debug(f"[HTTP] {self.carrier_name} {method} {url} -> {response.status_code}")
        return response

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """GET request."""
        return await self.request("GET", url, **kwargs)

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET a JSON document.

        Raises:
            ProviderError: On non-2xx status or a body that is not JSON
        """
        response = await self.get(url, params=params, headers=headers)

        if not response.is_success:
            logger.error(
                f"[HTTP] {self.carrier_name} error: {response.status_code} - {response.text[:300]}"
            )
            raise ProviderError(
                f"{self.carrier_name} returned HTTP {response.status_code}",
                carrier=self.carrier_name,
                code=str(response.status_code),
                details={"url": str(response.request.url), "status": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.carrier_name} returned a malformed response",
                carrier=self.carrier_name,
                code="MALFORMED_RESPONSE",
                details={"error": str(e), "raw": response.text[:300]},
            )
