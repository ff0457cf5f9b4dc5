"""
Interparcel Session Bootstrap

The per-service quote endpoint only answers requests carrying a PHP session
cookie and the CSRF token embedded in the quote page. Both are obtained by
loading the public select-service page the way a browser would:

1. GET the page without following redirects
2. Merge every Set-Cookie into a local jar
3. On a 3xx with Location, resolve it against the current URL and repeat,
   sending the jar back as a Cookie header (at most INTERPARCEL_SESSION_MAX_HOPS)
4. Read the csrf-token meta tag from the final HTML

Raw headers and HTML never leave this module; callers get a CarrierSession
or a SessionError / CsrfTokenError.
"""
import logging
import re
from typing import Dict, Iterable, Optional
from urllib.parse import urlencode, urljoin

from parted_euro.core.config import settings
from parted_euro.core.exceptions import CsrfTokenError, SessionError
from parted_euro.models.shipping import CarrierSession, ShippingRequest
from parted_euro.services.interparcel_client import CARRIER_NAME, InterparcelClient, format_number

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/118.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

CSRF_META_PATTERN = re.compile(
    r"""<meta\s+name=["']csrf-token["']\s+content=["']([^"']+)["']""",
    re.IGNORECASE,
)

SESSION_COOKIE_NAMES = ("phpsessid", "phpsessionid")


def build_quote_page_url(request: ShippingRequest, site_url: Optional[str] = None) -> str:
    """Select-service page URL for the request's package and route (unpadded dimensions)."""
    base = (site_url or settings.INTERPARCEL_SITE_URL).rstrip("/")
    package_type = "pallet" if request.weight_kg >= settings.PALLET_WEIGHT_THRESHOLD_KG else "parcel"
    package = "|".join(
        format_number(v)
        for v in (request.weight_kg, request.length_cm, request.width_cm, request.height_cm)
    )
    query = urlencode({
        "p": package,
        "t": package_type,
        "ct": settings.SHIPPING_ORIGIN_CITY,
        "cs": settings.SHIPPING_ORIGIN_STATE,
        "cp": settings.SHIPPING_ORIGIN_POSTCODE,
        "cc": settings.SHIPPING_ORIGIN_COUNTRY_NAME,
        "dt": request.destination_city or "",
        "ds": request.destination_state or "",
        "dp": request.destination_postcode or "",
        "dc": request.destination_country,
    })
    return f"{base}/quote/select-service?{query}"


def merge_set_cookies(jar: Dict[str, str], set_cookie_values: Iterable[str]) -> None:
    """Add name=value pairs from Set-Cookie header values to the jar. Attributes are ignored."""
    for header in set_cookie_values:
        first = header.split(";", 1)[0].strip()
        name, sep, value = first.partition("=")
        name = name.strip()
        if sep and name:
            jar[name] = value.strip()


def find_session_cookie(jar: Dict[str, str]) -> Optional[str]:
    for name, value in jar.items():
        if name.lower() in SESSION_COOKIE_NAMES and value:
            return value
    return None


def extract_csrf_token(html: str) -> Optional[str]:
    match = CSRF_META_PATTERN.search(html or "")
    return match.group(1) if match else None


async def establish_session(
    client: InterparcelClient,
    request: ShippingRequest,
    max_hops: Optional[int] = None,
) -> CarrierSession:
    """
    Load the quote page and harvest a session cookie and CSRF token.

    Args:
        client: Open InterparcelClient
        request: The quote request, used to build the page URL
        max_hops: Maximum pages fetched, redirects included

    Returns:
        CarrierSession for this request only

    Raises:
        SessionError: No PHP session cookie was set
        CsrfTokenError: The final page had no csrf-token meta tag
        ProviderError: Transport failure or timeout
    """
    hops = max_hops if max_hops is not None else settings.INTERPARCEL_SESSION_MAX_HOPS
    url = build_quote_page_url(request)
    jar: Dict[str, str] = {}
    html = ""

    for hop in range(hops):
        headers = dict(BROWSER_HEADERS)
        if jar:
            headers["Cookie"] = "; ".join(f"{k}={v}" for k, v in jar.items())

        response = await client.fetch_page(url, headers)
        merge_set_cookies(jar, response.headers.get_list("set-cookie"))

        location = response.headers.get("location")
        if 300 <= response.status_code < 400 and location:
            url = urljoin(url, location)
            logger.debug(f"[INTERPARCEL] Session hop {hop + 1} redirected to {url}")
            continue

        html = response.text
        break
    else:
        logger.warning(f"[INTERPARCEL] Session bootstrap stopped after {hops} redirects")

    if not find_session_cookie(jar):
        raise SessionError(
            "PHPSESSID not found in Interparcel response",
            carrier=CARRIER_NAME,
            details={"cookies": sorted(jar.keys())},
        )

    csrf_token = extract_csrf_token(html)
    if not csrf_token:
        raise CsrfTokenError(
            "Failed to obtain CSRF token from Interparcel",
            carrier=CARRIER_NAME,
        )

    logger.info(f"[INTERPARCEL] Session established ({len(jar)} cookies)")
    return CarrierSession(cookies=dict(jar), csrf_token=csrf_token)
