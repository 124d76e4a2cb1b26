"""Domain module - Pure business logic"""

from pricewatch.domain.errors import (
    BrowserUnavailable,
    ExtractionError,
    NameNotFound,
    NavigationFailed,
    NotificationFailed,
    PriceNotFound,
    PriceUnparsable,
    PriceWatchError,
    ProductLimitReached,
    StorageError,
    UnsupportedDomain,
)
from pricewatch.domain.models import (
    ExtractionResult,
    ItemOutcome,
    TickSummary,
    TrackedProduct,
)
from pricewatch.domain.rules import (
    is_price_drop,
    parse_clock_reading,
    parse_price,
    parse_split_price,
    price_difference,
    registrable_domain,
)

__all__ = [
    "TrackedProduct",
    "ExtractionResult",
    "ItemOutcome",
    "TickSummary",
    "PriceWatchError",
    "UnsupportedDomain",
    "NavigationFailed",
    "BrowserUnavailable",
    "ExtractionError",
    "NameNotFound",
    "PriceNotFound",
    "PriceUnparsable",
    "NotificationFailed",
    "StorageError",
    "ProductLimitReached",
    "parse_price",
    "parse_split_price",
    "parse_clock_reading",
    "registrable_domain",
    "is_price_drop",
    "price_difference",
]
