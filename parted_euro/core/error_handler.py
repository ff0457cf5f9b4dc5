"""
Shipping error bodies and the catch-all sanitization middleware.

Shipping failures are reported as ``{"code", "message"}`` so the storefront
can show "shipping unavailable" without parsing carrier text.
Carrier credentials and tracebacks are logged, never returned.
"""
import logging
from typing import Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from parted_euro.core.config import settings
from parted_euro.core.exceptions import ShippingError

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Shipping is currently unavailable. Please try again later."
INTERNAL_MESSAGE = "An unexpected error occurred. Please try again later."
MAX_MESSAGE_LENGTH = 200

# Lower-cased fragments that mark a carrier message as unsafe to show
SENSITIVE_PATTERNS = (
    "auth-key",
    "secret",
    "token",
    "cookie",
    "phpsessid",
    "credential",
    "traceback",
    "file \"",
    "/parted_euro/",
    "\\parted_euro\\",
)


def sanitize_error_message(message: str) -> str:
    """Mask carrier messages that leak credentials or internals, and cap the length."""
    if settings.DEBUG:
        return message

    lowered = message.lower()
    if any(pattern in lowered for pattern in SENSITIVE_PATTERNS):
        return UNAVAILABLE_MESSAGE

    if len(message) > MAX_MESSAGE_LENGTH:
        return message[:MAX_MESSAGE_LENGTH] + "..."
    return message


def shipping_error_body(error: ShippingError) -> Dict[str, str]:
    return {"code": error.code, "message": sanitize_error_message(error.message)}


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """
    Turn anything a route lets escape into a ``{code, message}`` body.

    A ShippingError that was not mapped by its route is a 400 like any other
    quote failure. Everything else is a bug: the traceback goes to the log and
    the client gets INTERNAL_ERROR.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except ShippingError as e:
            logger.warning(f"[SHIPPING] Unmapped shipping error on {request.url.path}: {e!r}")
            return JSONResponse(status_code=400, content=shipping_error_body(e))
        except Exception as e:
            logger.exception(f"[SHIPPING] Unhandled {type(e).__name__} on {request.method} {request.url.path}")
            message = str(e) if settings.DEBUG else INTERNAL_MESSAGE
            return JSONResponse(
                status_code=500,
                content={"code": "INTERNAL_ERROR", "message": message},
            )
