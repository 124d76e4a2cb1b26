"""
Relogio Online extractor - reads the clock as a "price".

The value changes every minute, which makes it a deterministic way to
exercise price drops end to end against a live page.
"""

from playwright.async_api import Page

from pricewatch.domain.models import ExtractionResult
from pricewatch.domain.rules import parse_clock_reading
from pricewatch.services.extractors.base import SiteExtractor


class RelogioOnlineExtractor(SiteExtractor):
    domain = "relogioonline"
    name_selector = "#lbl-title"
    price_selector = "#lbl-time"

    async def read(self, page: Page) -> ExtractionResult:
        name = await self.read_name(page)
        clock_text = await self.read_price_text(page)

        return ExtractionResult(name=name, price=parse_clock_reading(clock_text))
