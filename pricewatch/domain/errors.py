"""Error taxonomy for extraction, navigation and tracking failures"""

from typing import Optional


class PriceWatchError(Exception):
    """Base class for every failure raised by pricewatch."""

    kind = "error"
    retryable = True


class UnsupportedDomain(PriceWatchError):
    """No extractor is registered for the URL's registrable domain."""

    kind = "unsupported_domain"
    retryable = False

    def __init__(self, domain: Optional[str]):
        self.domain = domain
        super().__init__(f"Unsupported domain: {domain or '<none>'}")


class NavigationFailed(PriceWatchError):
    """The page did not load successfully."""

    kind = "navigation_failed"

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        message = f"Error fetching {url}. Status: {status}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class BrowserUnavailable(PriceWatchError):
    """The shared browser session could not be opened."""

    kind = "browser_unavailable"


class ExtractionError(PriceWatchError):
    """The page loaded but did not match the extractor's expected layout."""

    kind = "extraction_failed"


class NameNotFound(ExtractionError):
    kind = "name_not_found"

    def __init__(self, selector: str = ""):
        self.selector = selector
        super().__init__(f"Product name not found ({selector})")


class PriceNotFound(ExtractionError):
    kind = "price_not_found"

    def __init__(self, selector: str = ""):
        self.selector = selector
        super().__init__(f"Product price not found or incomplete ({selector})")


class PriceUnparsable(ExtractionError):
    kind = "price_unparsable"

    def __init__(self, raw: Optional[str]):
        self.raw = raw
        super().__init__(f"Failed to parse product price: {raw!r}")


class NotificationFailed(PriceWatchError):
    """An email could not be delivered."""

    kind = "notification_failed"


class StorageError(PriceWatchError):
    """The product store rejected or failed an operation."""

    kind = "storage_failed"


class ProductLimitReached(PriceWatchError):
    """The owner already tracks the maximum number of products."""

    kind = "product_limit_reached"
    retryable = False

    def __init__(self, owner: str, limit: int):
        self.owner = owner
        self.limit = limit
        super().__init__(f"You have reached the maximum number of products ({limit}).")
