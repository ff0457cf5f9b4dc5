"""
Per-client rate limiting for the quote endpoints.

Each quote fans out to several carrier calls, so /shipping/services carries
RATE_LIMIT_SHIPPING on top of the app-wide RATE_LIMIT_DEFAULT.
"""
import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from parted_euro.core.config import settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    # Storefront sits behind a proxy; the first hop is the shopper
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_ip,
    enabled=settings.RATE_LIMIT_ENABLED,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the shipping error shape, with Retry-After set to the breached window."""
    window_seconds = exc.limit.limit.get_expiry()
    logger.warning(
        f"[SHIPPING] Rate limit {exc.limit.limit} hit by {get_client_ip(request)} on {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "code": "RATE_LIMITED",
            "message": f"Too many shipping requests. Please try again in {window_seconds} seconds.",
        },
        headers={"Retry-After": str(window_seconds)},
    )
