"""
Shipping Option Assembler

Builds the final option list shown at checkout:
admin override first (staff only), then pickup, then carrier options in the
order they were returned. Options are not sorted by price.
"""
from typing import Iterable, List, Optional

from parted_euro.core.config import settings
from parted_euro.models.shipping import ShippingOption
from parted_euro.modules.shipping.normalizer import admin_option, pickup_option


def assemble_options(
    carrier_options: Iterable[ShippingOption],
    include_pickup: bool,
    is_admin: bool = False,
    max_options: Optional[int] = None,
) -> List[ShippingOption]:
    """
    Merge synthetic and carrier options.

    Duplicate display names keep their first occurrence, and the list is cut
    to max_options (MAX_SHIPPING_OPTIONS by default).
    """
    limit = max_options if max_options is not None else settings.MAX_SHIPPING_OPTIONS

    candidates: List[ShippingOption] = []
    if is_admin:
        candidates.append(admin_option())
    if include_pickup:
        candidates.append(pickup_option())
    candidates.extend(carrier_options)

    seen = set()
    options = []
    for option in candidates:
        if option.display_name in seen:
            continue
        seen.add(option.display_name)
        options.append(option)

    return options[:limit]
