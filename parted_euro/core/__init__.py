from parted_euro.core.config import settings
from parted_euro.core.exceptions import (
    PartedEuroError,
    ShippingError,
    ProviderError,
)
