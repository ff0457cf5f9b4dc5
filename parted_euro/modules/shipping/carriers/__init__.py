"""
Carrier Registry and Factory

- CarrierFactory creates carrier instances based on CarrierCode
- Carriers register themselves with @register_carrier
- Carriers can share code internally (codependent, not isolated)
"""
from typing import Dict, List, Optional, Type
import logging

import httpx

from parted_euro.models.shipping import CarrierCode
from parted_euro.modules.shipping.carriers.base import BaseCarrier

logger = logging.getLogger(__name__)

# Registry of carrier implementations
_CARRIER_REGISTRY: Dict[CarrierCode, Type[BaseCarrier]] = {}


def register_carrier(carrier_code: CarrierCode):
    """
    Decorator to register a carrier implementation.

    Usage:
        @register_carrier(CarrierCode.INTERPARCEL)
        class InterparcelCarrier(BaseCarrier):
            ...
    """
    def decorator(cls: Type[BaseCarrier]):
        _CARRIER_REGISTRY[carrier_code] = cls
        logger.debug(f"Registered carrier: {carrier_code.value} -> {cls.__name__}")
        return cls
    return decorator


class CarrierFactory:
    """Factory for creating carrier instances."""

    @classmethod
    def get_carrier(
        cls,
        carrier_code: CarrierCode,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Optional[BaseCarrier]:
        """
        Get a carrier instance.

        Args:
            carrier_code: The carrier to get
            transport: Optional httpx transport shared by the carrier's HTTP calls

        Returns:
            BaseCarrier instance or None if not registered
        """
        carrier_cls = _CARRIER_REGISTRY.get(carrier_code)
        if not carrier_cls:
            logger.warning(f"No implementation registered for carrier: {carrier_code.value}")
            return None

        return carrier_cls(transport=transport)

    @classmethod
    def get_registered_carriers(cls) -> List[CarrierCode]:
        """Get list of all registered carrier codes."""
        return list(_CARRIER_REGISTRY.keys())


# Import carriers to trigger registration
# These imports must be at the bottom to avoid circular imports
from parted_euro.modules.shipping.carriers.auspost import (  # noqa: E402, F401
    AusPostDomesticCarrier,
    AusPostInternationalCarrier,
)
from parted_euro.modules.shipping.carriers.interparcel import InterparcelCarrier  # noqa: E402, F401
