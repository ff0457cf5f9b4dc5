"""
API dependencies
"""
import hmac
import logging
from typing import Optional

from fastapi import Header

from parted_euro.core.config import settings

logger = logging.getLogger(__name__)


async def get_is_admin(
    x_admin_token: Optional[str] = Header(None, alias="X-Admin-Token"),
) -> bool:
    """
    True when the caller presents the configured admin token.

    A missing or wrong token is not an error; the caller simply gets the
    customer view. An unset ADMIN_API_TOKEN disables the override.
    """
    if not x_admin_token or not settings.ADMIN_API_TOKEN:
        return False

    is_admin = hmac.compare_digest(
        x_admin_token.encode("utf-8"),
        settings.ADMIN_API_TOKEN.encode("utf-8"),
    )
    if not is_admin:
        logger.warning("Invalid admin token presented to shipping API")
    return is_admin
