"""
Magazine Luiza extractor - price preceded by a label ("ou R$ 3.499,99").
"""

from playwright.async_api import Page

from pricewatch.domain.models import ExtractionResult
from pricewatch.domain.rules import parse_price
from pricewatch.services.extractors.base import SiteExtractor


class MagazineLuizaExtractor(SiteExtractor):
    domain = "magazineluiza"
    name_selector = 'h1[data-testid="heading-product-title"]'
    price_selector = '[data-testid="price-value"]'

    async def read(self, page: Page) -> ExtractionResult:
        name = await self.read_name(page)
        # Labels such as "ou" / "a partir de" are stripped by the parser
        price_text = await self.read_price_text(page)

        return ExtractionResult(
            name=name, price=parse_price(price_text, self.decimal_separator)
        )
