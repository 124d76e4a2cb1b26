"""
Amazon extractor - price rendered as separate whole and fraction spans.
"""

from playwright.async_api import Page

from pricewatch.domain.models import ExtractionResult
from pricewatch.domain.rules import parse_split_price
from pricewatch.services.extractors.base import SiteExtractor


class AmazonExtractor(SiteExtractor):
    domain = "amazon"
    name_selector = "#productTitle"
    whole_selector = ".a-price-whole"
    fraction_selector = ".a-price-fraction"

    async def read(self, page: Page) -> ExtractionResult:
        name = await self.read_name(page)

        # "1.234," + "56": the whole span carries grouping and the separator
        whole = await self.read_price_text(page, self.whole_selector)
        fraction = await self.read_price_text(page, self.fraction_selector)

        return ExtractionResult(name=name, price=parse_split_price(whole, fraction))
