"""
Mercado Livre extractor - price published in a microdata meta attribute.
"""

from playwright.async_api import Page

from pricewatch.domain.errors import PriceNotFound
from pricewatch.domain.models import ExtractionResult
from pricewatch.domain.rules import parse_price
from pricewatch.services.extractors.base import SiteExtractor, first_attribute


class MercadoLivreExtractor(SiteExtractor):
    domain = "mercadolivre"
    decimal_separator = "."
    name_selector = ".ui-pdp-title"
    price_selector = 'meta[itemprop="price"]'

    async def read(self, page: Page) -> ExtractionResult:
        name = await self.read_name(page)

        raw_price = await first_attribute(page, self.price_selector, "content")
        if not raw_price:
            raise PriceNotFound(f"{self.price_selector}@content")

        return ExtractionResult(
            name=name, price=parse_price(raw_price, self.decimal_separator)
        )
