import pytest

from parted_euro.core.error_handler import (
    UNAVAILABLE_MESSAGE,
    sanitize_error_message,
    shipping_error_body,
)
from parted_euro.core.exceptions import MissingServiceError, ProviderError


@pytest.mark.parametrize(
    "message",
    [
        "Invalid AUTH-KEY header",
        "Set-Cookie missing PHPSESSID",
        "csrf token rejected",
        'File "/srv/parted_euro/services/auspost_client.py", line 40',
    ],
)
def test_sensitive_messages_are_masked(message):
    assert sanitize_error_message(message) == UNAVAILABLE_MESSAGE


def test_plain_messages_pass_through():
    assert sanitize_error_message("Shipping not available") == "Shipping not available"


def test_long_messages_are_capped():
    sanitized = sanitize_error_message("x" * 500)

    assert len(sanitized) == 203
    assert sanitized.endswith("...")


def test_shipping_error_body_keeps_code():
    error = MissingServiceError("Shipping not available", carrier="AusPost")

    assert shipping_error_body(error) == {
        "code": "MISSING_SERVICE",
        "message": "Shipping not available",
    }


def test_shipping_error_body_masks_provider_detail():
    error = ProviderError("AusPost rejected AUTH-KEY abc123", carrier="AusPost", code="403")

    assert shipping_error_body(error) == {"code": "403", "message": UNAVAILABLE_MESSAGE}
