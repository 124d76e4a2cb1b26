"""
Browser session manager for Playwright.
Owns the single shared browser process and context used for rendering.

Lifecycle: closed -> opening -> open -> closing -> closed. Opening and
closing are serialized behind one lock; borrowing a page from an open
session is not.
"""

import asyncio
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Callable, Optional

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from pricewatch.core.config import Settings
from pricewatch.core.constants import (
    BROWSER_IGNORE_DEFAULT_ARGS,
    BROWSER_LAUNCH_ARGS,
    BROWSER_LOCALE,
    BROWSER_VIEWPORT,
    HIDE_WEBDRIVER_SCRIPT,
)
from pricewatch.core.logger import get_logger
from pricewatch.domain.errors import BrowserUnavailable

logger = get_logger(__name__)


class SessionState(str, Enum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"


class BrowserSessionManager:
    """Manages creation, sharing and idle shutdown of the Playwright browser."""

    def __init__(
        self,
        headless: bool = True,
        user_agent: Optional[str] = None,
        playwright_factory: Callable[[], Any] = async_playwright,
    ):
        self.headless = headless
        self.user_agent = user_agent
        self._playwright_factory = playwright_factory
        self._lock = asyncio.Lock()
        self._state = SessionState.CLOSED
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._open_pages = 0
        # Bumped on every teardown so late close events from an old
        # context never touch the page count of a newer one
        self._generation = 0
        self._launch_failures = 0
        self._launch_error: Optional[BaseException] = None
        self.launch_count = 0

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "BrowserSessionManager":
        return cls(
            headless=settings.scraper_headless,
            user_agent=settings.user_agent,
            **kwargs,
        )

    async def __aenter__(self):
        await self.ensure_open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def open_pages(self) -> int:
        return self._open_pages

    async def ensure_open(self) -> None:
        """Launch the browser unless it is already open.

        Concurrent callers that find the session closed queue on the lock;
        the first one launches, the others see it open and reuse it.
        """
        if self._state is SessionState.OPEN:
            return

        observed_failures = self._launch_failures
        async with self._lock:
            if self._state is SessionState.OPEN:
                return

            # Waiters queued behind a failed launch share its failure
            if self._launch_failures != observed_failures and self._launch_error is not None:
                error = self._launch_error
                raise BrowserUnavailable(f"Could not get browser instance: {error}") from error

            self._state = SessionState.OPENING
            logger.info("starting_browser", headless=self.headless)
            try:
                await self._launch()
            except Exception as e:
                logger.error("browser_launch_failed", error=str(e))
                self._launch_failures += 1
                self._launch_error = e
                await self._teardown()
                self._state = SessionState.CLOSED
                raise BrowserUnavailable(f"Could not get browser instance: {e}") from e

            self._launch_error = None
            self._state = SessionState.OPEN
            self.launch_count += 1
            logger.info("browser_started", launches=self.launch_count)

    async def new_page(self) -> Page:
        """Borrow a new page from the shared context.

        The caller owns the page and must close it; closing releases the
        page count whichever path closes it.
        """
        await self.ensure_open()

        # Reserved before the await so an idle sweep sees the page as busy
        self._open_pages += 1
        generation = self._generation
        try:
            page = await self._context.new_page()
        except Exception as e:
            self._release_page(generation)
            logger.error("page_creation_failed", error=str(e))
            raise BrowserUnavailable(f"Could not open a new page: {e}") from e

        page.once("close", lambda _page: self._release_page(generation))
        logger.debug("page_opened", open_pages=self._open_pages)
        return page

    @asynccontextmanager
    async def borrow(self) -> AsyncIterator["BrowserSessionManager"]:
        """Open the session and hold it busy for the duration of the block.

        The hold counts as a borrowed page, so an idle sweep leaves the
        session alone until the block exits.
        """
        await self.ensure_open()
        self._open_pages += 1
        generation = self._generation
        logger.debug("browser_borrowed", open_pages=self._open_pages)
        try:
            yield self
        finally:
            self._release_page(generation)

    async def close_if_idle(self) -> bool:
        """Tear the session down when it is open and no page is borrowed.

        Returns True when the browser was closed.
        """
        async with self._lock:
            if self._state is not SessionState.OPEN:
                return False

            if self._open_pages > 0:
                logger.debug("browser_busy_skip_close", open_pages=self._open_pages)
                return False

            logger.info("closing_idle_browser")
            self._state = SessionState.CLOSING
            await self._teardown()
            self._state = SessionState.CLOSED
            logger.info("browser_closed")
            return True

    async def close(self) -> None:
        """Close browser and cleanup regardless of borrowed pages."""
        async with self._lock:
            if self._state is SessionState.CLOSED:
                return

            self._state = SessionState.CLOSING
            await self._teardown()
            self._state = SessionState.CLOSED
            logger.info("browser_closed", forced=True)

    async def _launch(self) -> None:
        self._playwright = await self._playwright_factory().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=BROWSER_LAUNCH_ARGS,
            ignore_default_args=BROWSER_IGNORE_DEFAULT_ARGS,
        )

        context_options = {
            "viewport": BROWSER_VIEWPORT,
            "locale": BROWSER_LOCALE,
            "ignore_https_errors": True,
        }
        if self.user_agent:
            context_options["user_agent"] = self.user_agent

        self._context = await self._browser.new_context(**context_options)

        # Hide webdriver property on every page of the context
        await self._context.add_init_script(HIDE_WEBDRIVER_SCRIPT)

    async def _teardown(self) -> None:
        self._generation += 1
        self._open_pages = 0

        for name, closer in (
            ("context", self._context.close if self._context else None),
            ("browser", self._browser.close if self._browser else None),
            ("playwright", self._playwright.stop if self._playwright else None),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                logger.warning("browser_teardown_error", resource=name, error=str(e))

        self._context = None
        self._browser = None
        self._playwright = None

    def _release_page(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._open_pages = max(0, self._open_pages - 1)
        logger.debug("page_closed", open_pages=self._open_pages)
