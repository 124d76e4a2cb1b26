"""On-demand product creation: scrape once, then start tracking."""

from typing import Optional

from pricewatch.core.config import Settings
from pricewatch.core.logger import get_logger
from pricewatch.domain.errors import ProductLimitReached
from pricewatch.domain.models import ExtractionResult, TrackedProduct
from pricewatch.services.gateway import RenderGateway
from pricewatch.services.notifier import PriceNotifier
from pricewatch.services.storage import SupabaseProductStore

logger = get_logger(__name__)


class ProductService:
    """Creates tracked products from a URL supplied by their owner.

    Unlike the scheduled tracker, every failure here propagates so the
    caller can reject the request.
    """

    def __init__(
        self,
        store: SupabaseProductStore,
        gateway: RenderGateway,
        notifier: Optional[PriceNotifier] = None,
        max_products_per_owner: int = 15,
    ):
        self.store = store
        self.gateway = gateway
        self.notifier = notifier
        self.max_products_per_owner = max_products_per_owner

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: SupabaseProductStore,
        gateway: RenderGateway,
        notifier: Optional[PriceNotifier] = None,
    ) -> "ProductService":
        return cls(
            store,
            gateway,
            notifier=notifier,
            max_products_per_owner=settings.max_products_per_owner,
        )

    async def preview(self, url: str) -> ExtractionResult:
        """Scrape name and price without persisting anything."""
        return await self.gateway.scrape(url)

    async def create(self, url: str, owner_email: str, owner_uid: str) -> TrackedProduct:
        """Scrape ``url`` and persist it as a tracked product.

        Raises:
            UnsupportedDomain: no extractor for the URL (checked first)
            ProductLimitReached: the owner is at the product limit
            NavigationFailed / ExtractionError / BrowserUnavailable: scrape failed
            StorageError: the product could not be stored
        """
        self.gateway.resolve_extractor(url)

        owned = await self.store.count_for_owner(owner_uid)
        if owned >= self.max_products_per_owner:
            logger.warning(
                "product_limit_reached", owner_uid=owner_uid, limit=self.max_products_per_owner
            )
            raise ProductLimitReached(owner_uid, self.max_products_per_owner)

        scraped = await self.gateway.scrape(url)
        product = await self.store.create_product(
            url=url,
            name=scraped.name,
            price=scraped.price,
            owner_email=owner_email,
            owner_uid=owner_uid,
        )

        await self._confirm(product)
        return product

    async def _confirm(self, product: TrackedProduct) -> None:
        if self.notifier is None or not self.notifier.is_configured():
            return

        try:
            await self.notifier.send_product_added_email(
                product.owner_email, product.name, product.current_price, product.url
            )
        except Exception as e:
            logger.warning(
                "product_added_email_failed", product_id=product.id, error=str(e)
            )
