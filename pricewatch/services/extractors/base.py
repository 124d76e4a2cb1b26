"""
Base class for site extractors.
An extractor reads a rendered product page and always releases it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from playwright.async_api import Page

from pricewatch.core.logger import get_logger
from pricewatch.domain.errors import NameNotFound, PriceNotFound
from pricewatch.domain.models import ExtractionResult
from pricewatch.domain.rules import DecimalSeparator

logger = get_logger(__name__)


async def first_text(page: Page, selector: str) -> Optional[str]:
    """Trimmed text of the first match, or None when nothing matches.

    Counting first keeps a missing element from waiting on the locator timeout.
    """
    locator = page.locator(selector).first
    if await locator.count() == 0:
        return None
    text = await locator.text_content()
    return text.strip() if text else None


async def first_attribute(page: Page, selector: str, attribute: str) -> Optional[str]:
    """Trimmed attribute of the first match, or None."""
    locator = page.locator(selector).first
    if await locator.count() == 0:
        return None
    value = await locator.get_attribute(attribute)
    return value.strip() if value else None


class SiteExtractor(ABC):
    """Turns a rendered page of one site into an ExtractionResult."""

    #: Registrable domain this extractor handles, e.g. "amazon"
    domain: str = ""
    decimal_separator: DecimalSeparator = ","
    name_selector: str = ""
    price_selector: str = ""

    async def extract(self, page: Page) -> ExtractionResult:
        """Read name and price, closing the page on every path."""
        try:
            result = await self.read(page)
            logger.debug(
                "product_extracted",
                domain=self.domain,
                name=result.name,
                price=str(result.price),
            )
            return result
        finally:
            await self._release(page)

    @abstractmethod
    async def read(self, page: Page) -> ExtractionResult:
        """Site-specific DOM reading."""

    async def read_name(self, page: Page) -> str:
        name = await first_text(page, self.name_selector)
        if not name:
            raise NameNotFound(self.name_selector)
        return name

    async def read_price_text(self, page: Page, selector: Optional[str] = None) -> str:
        selector = selector or self.price_selector
        text = await first_text(page, selector)
        if not text:
            raise PriceNotFound(selector)
        return text

    async def _release(self, page: Page) -> None:
        try:
            await page.close()
        except Exception as e:
            logger.debug("page_close_error", domain=self.domain, error=str(e))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} domain={self.domain!r}>"
