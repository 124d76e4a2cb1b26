"""
OLX extractor - price text prefixed with the currency symbol ("R$ 2.300").
"""

from playwright.async_api import Page

from pricewatch.domain.models import ExtractionResult
from pricewatch.domain.rules import parse_price
from pricewatch.services.extractors.base import SiteExtractor


class OlxExtractor(SiteExtractor):
    domain = "olx"
    name_selector = ".olx-text.olx-text--title-medium.olx-text--block.ad__sc-1l883pa-2.bdcWAn"
    price_selector = ".olx-text.olx-text--title-large.olx-text--block"

    async def read(self, page: Page) -> ExtractionResult:
        name = await self.read_name(page)
        price_text = await self.read_price_text(page)

        return ExtractionResult(
            name=name, price=parse_price(price_text, self.decimal_separator)
        )
