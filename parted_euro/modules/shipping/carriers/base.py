"""
Base Carrier Interface

- All carrier clients implement BaseCarrier.quote()
- Provider-specific response shapes stay inside each carrier; everything
  returned from quote() is already a normalized ShippingOption
- Carriers can share code internally (normalizer, HTTP client)
"""
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx

from parted_euro.models.shipping import CarrierCode, ShippingOption, ShippingRequest


class BaseCarrier(ABC):
    """
    Abstract base class for all carrier-rate providers.

    Carriers are stateless between quotes: each quote() opens its own HTTP
    client (optionally over an injected transport) and closes it afterwards.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            transport: Optional httpx transport, used by tests to fake carrier APIs
        """
        self._transport = transport

    @property
    @abstractmethod
    def carrier_code(self) -> CarrierCode:
        """Return the carrier code enum value."""
        pass

    @property
    @abstractmethod
    def carrier_name(self) -> str:
        """Return the human-readable carrier name."""
        pass

    @abstractmethod
    async def quote(self, request: ShippingRequest) -> List[ShippingOption]:
        """
        Get normalized shipping options from the carrier.

        Args:
            request: Package and destination

        Returns:
            List of ShippingOption in provider order

        Raises:
            ProviderError (or a subclass) on any failure
        """
        pass
