"""
Parted Euro Exception Hierarchy

All exceptions include code, message, and details for logging and for the
structured error body returned by the API.

Exception Hierarchy:
    PartedEuroError
    └── ShippingError
        ├── ProviderError
        │   ├── RouteUnavailableError
        │   ├── MissingServiceError
        │   ├── SessionError
        │   ├── CsrfTokenError
        │   └── NoServicesAvailableError
        └── NoShippableOptionError
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class PartedEuroError(Exception):
    """
    Base exception for all Parted Euro custom errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
    """

    default_code: str = "PARTED_EURO_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# SHIPPING ERRORS
# =============================================================================

class ShippingError(PartedEuroError):
    """Base exception for shipping-related errors."""
    default_code = "SHIPPING_ERROR"


class ProviderError(ShippingError):
    """A carrier endpoint failed, timed out, or returned a malformed payload."""
    default_code = "PROVIDER_ERROR"

    def __init__(
        self,
        message: str,
        carrier: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details["carrier"] = carrier
        self.carrier = carrier
        super().__init__(message, details=details, **kwargs)


class RouteUnavailableError(ProviderError):
    """The carrier reported the route itself as unavailable (not a transient fault)."""
    default_code = "ROUTE_UNAVAILABLE"


class MissingServiceError(ProviderError):
    """A known carrier omitted an expected service tier."""
    default_code = "MISSING_SERVICE"

    def __init__(
        self,
        message: str,
        missing_services: Optional[list] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details["missing_services"] = missing_services or []
        super().__init__(message, details=details, **kwargs)


class SessionError(ProviderError):
    """Session bootstrap finished without a session cookie."""
    default_code = "SESSION_FAILED"


class CsrfTokenError(ProviderError):
    """Session bootstrap page did not contain an anti-forgery token."""
    default_code = "CSRF_TOKEN_MISSING"


class NoServicesAvailableError(ProviderError):
    """Every per-service quote failed or came back empty."""
    default_code = "NO_SERVICES_AVAILABLE"


class NoShippableOptionError(ShippingError):
    """No shipping option remains after applying the selection policy."""
    default_code = "NO_SHIPPABLE_OPTION"
