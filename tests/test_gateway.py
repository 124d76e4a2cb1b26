"""Tests for RenderGateway."""

from decimal import Decimal

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from pricewatch.core.config import Settings
from pricewatch.domain.errors import NavigationFailed, UnsupportedDomain
from pricewatch.services.gateway import RenderGateway
from pricewatch.services.utils import BrowserSessionManager
from tests.conftest import FakePage, FakePlaywrightFactory, FakeResponse

AMAZON_URL = "https://www.amazon.com.br/dp/B0TEST"
AMAZON_PAGE = {
    "#productTitle": "Kindle",
    ".a-price-whole": "499,",
    ".a-price-fraction": "00",
}


def _make_gateway(page_factory=None):
    """Build a gateway on a fake browser.

    Returns (gateway, browser, playwright_factory).
    """
    factory = FakePlaywrightFactory(page_factory)
    browser = BrowserSessionManager(playwright_factory=factory)
    return RenderGateway(browser, timeout_ms=5000), browser, factory


class TestResolveExtractor:
    """Tests for extractor resolution."""

    @pytest.mark.asyncio
    async def test_unsupported_domain_never_opens_page(self) -> None:
        gateway, browser, factory = _make_gateway()

        with pytest.raises(UnsupportedDomain) as exc_info:
            await gateway.scrape("https://www.ebay.com/itm/1")

        assert exc_info.value.domain == "ebay"
        assert exc_info.value.retryable is False
        assert factory.launches == 0

    def test_missing_domain(self) -> None:
        gateway, _, _ = _make_gateway()

        with pytest.raises(UnsupportedDomain):
            gateway.resolve_extractor("not a url")


class TestScrape:
    """Tests for rendering plus extraction."""

    @pytest.mark.asyncio
    async def test_scrape_success_releases_page(self) -> None:
        gateway, browser, factory = _make_gateway(lambda: FakePage(dict(AMAZON_PAGE)))

        result = await gateway.scrape(AMAZON_URL)

        assert result.name == "Kindle"
        assert result.price == Decimal("499.00")
        page = factory.contexts[0].pages[0]
        assert page.visited == [AMAZON_URL]
        assert page.closed
        assert browser.open_pages == 0

    @pytest.mark.asyncio
    async def test_non_ok_status(self) -> None:
        gateway, browser, factory = _make_gateway(
            lambda: FakePage(response=FakeResponse(status=503))
        )

        with pytest.raises(NavigationFailed) as exc_info:
            await gateway.scrape(AMAZON_URL)

        assert exc_info.value.status == 503
        assert factory.contexts[0].pages[0].closed
        assert browser.open_pages == 0

    @pytest.mark.asyncio
    async def test_navigation_timeout(self) -> None:
        gateway, browser, factory = _make_gateway(
            lambda: FakePage(goto_error=PlaywrightTimeout("Timeout 5000ms exceeded"))
        )

        with pytest.raises(NavigationFailed) as exc_info:
            await gateway.scrape(AMAZON_URL)

        assert exc_info.value.status is None
        assert "timeout" in str(exc_info.value)
        assert factory.contexts[0].pages[0].closed

    @pytest.mark.asyncio
    async def test_navigation_error(self) -> None:
        gateway, _, factory = _make_gateway(
            lambda: FakePage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        )

        with pytest.raises(NavigationFailed):
            await gateway.scrape(AMAZON_URL)

        assert factory.contexts[0].pages[0].closed

    @pytest.mark.asyncio
    async def test_fetch_returns_open_page(self) -> None:
        gateway, browser, _ = _make_gateway(lambda: FakePage(dict(AMAZON_PAGE)))

        page = await gateway.fetch(AMAZON_URL)

        assert not page.closed
        assert browser.open_pages == 1
        await page.close()
        assert browser.open_pages == 0


class TestFromSettings:
    def test_uses_navigation_settings(self) -> None:
        settings = Settings(navigation_timeout_ms=12000, wait_until="load")
        browser = BrowserSessionManager(playwright_factory=FakePlaywrightFactory())

        gateway = RenderGateway.from_settings(settings, browser)

        assert gateway.timeout_ms == 12000
        assert gateway.wait_until == "load"
