"""
Tracking service.
Re-checks stale products concurrently and acts on price drops.

Every product settles into an ItemOutcome; a failing product is logged
and counted, never allowed to abort its siblings.
"""

import asyncio
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from pricewatch.core.config import Settings
from pricewatch.core.logger import get_logger, log_tick_summary
from pricewatch.domain.errors import BrowserUnavailable, ExtractionError, PriceWatchError
from pricewatch.domain.models import ExtractionResult, ItemOutcome, TickSummary, TrackedProduct
from pricewatch.domain.rules import is_price_drop
from pricewatch.services.gateway import RenderGateway
from pricewatch.services.notifier import Notifier
from pricewatch.services.storage import ProductStore
from pricewatch.services.utils.browser_manager import BrowserSessionManager

logger = get_logger(__name__)


class TrackingService:
    """Runs tracking ticks: list stale products, scrape, compare, notify."""

    def __init__(
        self,
        store: ProductStore,
        gateway: RenderGateway,
        browser: BrowserSessionManager,
        notifier: Optional[Notifier] = None,
        staleness_threshold: timedelta = timedelta(minutes=7),
        jitter_range: Tuple[float, float] = (1.0, 7.0),
        max_concurrent: Optional[int] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.browser = browser
        self.notifier = notifier
        self.staleness_threshold = staleness_threshold
        self.jitter_range = jitter_range
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent else None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: ProductStore,
        gateway: RenderGateway,
        browser: BrowserSessionManager,
        notifier: Optional[Notifier] = None,
    ) -> "TrackingService":
        return cls(
            store,
            gateway,
            browser,
            notifier=notifier,
            staleness_threshold=timedelta(minutes=settings.staleness_threshold_minutes),
            jitter_range=settings.jitter_range_seconds,
            max_concurrent=settings.max_concurrent,
        )

    async def run_tick(self) -> TickSummary:
        """Check every stale product once and summarize the outcomes."""
        summary = TickSummary()
        products = await self.store.list_stale(self.staleness_threshold)
        logger.info("tracking_tick_started", stale_products=len(products))

        if not products:
            return self._finish(summary)

        # One browser for the whole batch, held busy through the jitter waits
        try:
            async with self.browser.borrow():
                summary.outcomes = await self._fan_out(products)
        except BrowserUnavailable as e:
            logger.error(
                "tracking_tick_browser_unavailable",
                products=len(products),
                error=str(e),
            )
            summary.outcomes = [self._failure(p, e.kind) for p in products]

        return self._finish(summary)

    async def track_product(self, product: TrackedProduct) -> ItemOutcome:
        """Scrape one product and apply the result. Never raises."""
        try:
            result = await self.gateway.scrape(product.url)
            dropped = is_price_drop(product.current_price, result.price)
            if dropped:
                await self.store.update_price(product.id, result.price)
            else:
                await self.store.touch_checked(product.id)
        except PriceWatchError as e:
            self._log_failure(product, e)
            return self._failure(product, e.kind)
        except Exception as e:
            logger.exception(
                "tracking_item_unexpected_error",
                product_id=product.id,
                url=product.url,
                error=str(e),
            )
            return self._failure(product, "unexpected")

        notified = False
        if dropped:
            logger.info(
                "price_drop_detected",
                product_id=product.id,
                name=product.name,
                old_price=str(product.current_price),
                new_price=str(result.price),
            )
            notified = await self._notify(product, result)
        else:
            logger.debug(
                "price_unchanged_or_higher",
                product_id=product.id,
                stored=str(product.current_price),
                scraped=str(result.price),
            )

        return ItemOutcome(
            product_id=product.id,
            status="success",
            price_dropped=dropped,
            notified=notified,
            old_price=product.current_price,
            new_price=result.price,
        )

    async def _fan_out(self, products: Sequence[TrackedProduct]) -> List[ItemOutcome]:
        results = await asyncio.gather(
            *(self._dispatch(product) for product in products),
            return_exceptions=True,
        )

        outcomes = []
        for product, result in zip(products, results):
            if isinstance(result, BaseException):
                logger.error(
                    "tracking_item_crashed", product_id=product.id, error=repr(result)
                )
                result = self._failure(product, "unexpected")
            outcomes.append(result)
        return outcomes

    async def _dispatch(self, product: TrackedProduct) -> ItemOutcome:
        # Spread requests so they don't all hit the sites at once
        delay = random.uniform(*self.jitter_range)
        logger.debug("jitter_wait", product_id=product.id, delay_s=round(delay, 2))
        await asyncio.sleep(delay)

        if self._semaphore is None:
            return await self.track_product(product)
        async with self._semaphore:
            return await self.track_product(product)

    async def _notify(self, product: TrackedProduct, result: ExtractionResult) -> bool:
        if self.notifier is None:
            logger.debug("notification_skipped", product_id=product.id, reason="no_notifier")
            return False

        try:
            await self.notifier.send_price_drop_email(
                product.owner_email,
                product.name,
                product.current_price,
                result.price,
                product.url,
            )
        except Exception as e:
            # The price update stands even when the email does not go out
            logger.error(
                "price_drop_notification_failed",
                product_id=product.id,
                to=product.owner_email,
                error=str(e),
            )
            return False

        return True

    def _log_failure(self, product: TrackedProduct, error: PriceWatchError) -> None:
        if isinstance(error, ExtractionError):
            # Repeated occurrences usually mean the site layout changed
            logger.warning(
                "extractor_layout_mismatch",
                product_id=product.id,
                url=product.url,
                kind=error.kind,
                error=str(error),
            )
        elif error.retryable:
            logger.warning(
                "tracking_item_failed",
                product_id=product.id,
                url=product.url,
                kind=error.kind,
                error=str(error),
            )
        else:
            logger.error(
                "tracking_item_rejected",
                product_id=product.id,
                url=product.url,
                kind=error.kind,
                error=str(error),
            )

    @staticmethod
    def _failure(product: TrackedProduct, kind: str) -> ItemOutcome:
        return ItemOutcome(product_id=product.id, status="failure", error_kind=kind)

    @staticmethod
    def _finish(summary: TickSummary) -> TickSummary:
        summary.finished_at = datetime.now(timezone.utc)
        log_tick_summary(logger, summary)
        return summary
