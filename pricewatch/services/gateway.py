"""
Fetch/render gateway.
Resolves the extractor for a URL, renders the page in the shared browser
and hands it back open and validated.
"""

from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeout

from pricewatch.core.config import Settings
from pricewatch.core.logger import get_logger
from pricewatch.domain.errors import NavigationFailed, UnsupportedDomain
from pricewatch.domain.models import ExtractionResult
from pricewatch.domain.rules import registrable_domain
from pricewatch.services.extractors import ExtractorRegistry, SiteExtractor, default_registry
from pricewatch.services.utils.browser_manager import BrowserSessionManager

logger = get_logger(__name__)


class RenderGateway:
    """Turns a product URL into a rendered page or an ExtractionResult."""

    def __init__(
        self,
        browser: BrowserSessionManager,
        registry: Optional[ExtractorRegistry] = None,
        timeout_ms: int = 30000,
        wait_until: str = "domcontentloaded",
    ):
        self.browser = browser
        self.registry = registry or default_registry
        self.timeout_ms = timeout_ms
        self.wait_until = wait_until

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        browser: BrowserSessionManager,
        registry: Optional[ExtractorRegistry] = None,
    ) -> "RenderGateway":
        return cls(
            browser,
            registry=registry,
            timeout_ms=settings.navigation_timeout_ms,
            wait_until=settings.wait_until,
        )

    def resolve_extractor(self, url: str) -> SiteExtractor:
        """Extractor for the URL's registrable domain or UnsupportedDomain."""
        domain = registrable_domain(url)
        extractor = self.registry.resolve(domain)
        if extractor is None:
            raise UnsupportedDomain(domain)
        return extractor

    async def fetch(self, url: str) -> Page:
        """Render ``url`` and return the open page.

        The caller owns the returned page: run the extractor on it, which
        closes it, or close it explicitly.
        """
        self.resolve_extractor(url)
        return await self._render(url)

    async def scrape(self, url: str) -> ExtractionResult:
        """Render ``url`` and run the matching extractor on it."""
        extractor = self.resolve_extractor(url)
        page = await self._render(url)
        return await extractor.extract(page)

    async def _render(self, url: str) -> Page:
        page = await self.browser.new_page()
        logger.debug("navigating_to_url", url=url)

        try:
            response = await page.goto(
                url, wait_until=self.wait_until, timeout=self.timeout_ms
            )
        except PlaywrightTimeout as e:
            await self._release(page)
            raise NavigationFailed(url, reason=f"timeout after {self.timeout_ms}ms") from e
        except PlaywrightError as e:
            await self._release(page)
            raise NavigationFailed(url, reason=str(e)[:150]) from e
        except BaseException:
            await self._release(page)
            raise

        if response is None or not response.ok:
            status = response.status if response is not None else None
            await self._release(page)
            raise NavigationFailed(url, status)

        logger.debug("page_loaded", url=url, status=response.status)
        return page

    async def _release(self, page: Page) -> None:
        try:
            await page.close()
        except Exception as e:
            logger.debug("page_close_error", error=str(e))
