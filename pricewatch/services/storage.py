"""Supabase product store with async wrappers over the sync client"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from supabase import Client, create_client

from pricewatch.core.config import settings
from pricewatch.core.logger import get_logger
from pricewatch.domain.errors import StorageError
from pricewatch.domain.models import TrackedProduct

logger = get_logger(__name__)

ProductId = Union[int, str]


class ProductStore(Protocol):
    """Persistence operations the tracker relies on."""

    async def list_stale(self, threshold: timedelta) -> List[TrackedProduct]: ...

    async def update_price(self, product_id: ProductId, price: Decimal) -> None: ...

    async def touch_checked(self, product_id: ProductId) -> None: ...


def _utc_timestamp(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def row_to_product(row: Dict[str, Any]) -> TrackedProduct:
    """Map a products table row onto TrackedProduct."""
    return TrackedProduct(
        id=row["id"],
        url=row["url"],
        name=row["name"],
        current_price=Decimal(str(row["current_price"])),
        owner_email=row["user_email"],
        owner_uid=row.get("user_uid"),
        last_checked_at=row.get("last_checked_at"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class SupabaseProductStore:
    """Async Supabase product store using run_in_executor"""

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        table: Optional[str] = None,
        client: Optional[Client] = None,
    ):
        """Initialize Supabase client

        Args:
            supabase_url: Override default URL from settings
            supabase_key: Override default key from settings
            table: Override the products table name
            client: Pre-built client (skips credential checks)
        """
        self.table = table or settings.products_table

        if client is None:
            url = supabase_url or settings.supabase_url
            key = supabase_key or settings.supabase_key
            if not url or not key:
                raise ValueError(
                    "Supabase credentials required. Set SUPABASE_URL and SUPABASE_KEY in .env"
                )
            client = create_client(url, key)
            logger.info("storage_initialized", url=url[:30] + "...")

        self.client: Client = client

    async def _execute(self, operation: str, query: Callable[[], Any]) -> Any:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, query)
        except Exception as e:
            logger.error("storage_operation_failed", operation=operation, error=str(e))
            raise StorageError(f"{operation} failed: {e}") from e

    async def list_stale(self, threshold: timedelta) -> List[TrackedProduct]:
        """Products whose last check is older than ``threshold``."""
        cutoff = _utc_timestamp(datetime.now(timezone.utc) - threshold)
        response = await self._execute(
            "list_stale",
            lambda: self.client.table(self.table)
            .select("*")
            .lt("last_checked_at", cutoff)
            .execute(),
        )

        products = []
        for row in response.data:
            try:
                products.append(row_to_product(row))
            except (KeyError, ValueError, ArithmeticError) as e:
                logger.warning("invalid_product_row", row_id=row.get("id"), error=str(e))

        logger.debug("stale_products_listed", count=len(products), cutoff=cutoff)
        return products

    async def update_price(self, product_id: ProductId, price: Decimal) -> None:
        """Store a new price and advance last_checked_at."""
        await self._execute(
            "update_price",
            lambda: self.client.table(self.table)
            .update({"current_price": str(price), "last_checked_at": _utc_timestamp()})
            .eq("id", product_id)
            .execute(),
        )
        logger.debug("product_price_updated", product_id=product_id, price=str(price))

    async def touch_checked(self, product_id: ProductId) -> None:
        """Advance last_checked_at only."""
        await self._execute(
            "touch_checked",
            lambda: self.client.table(self.table)
            .update({"last_checked_at": _utc_timestamp()})
            .eq("id", product_id)
            .execute(),
        )

    async def create_product(
        self,
        url: str,
        name: str,
        price: Decimal,
        owner_email: str,
        owner_uid: str,
    ) -> TrackedProduct:
        """Insert a newly scraped product and return the stored row."""
        record = {
            "name": name,
            "current_price": str(price),
            "url": url,
            "user_uid": owner_uid,
            "user_email": owner_email,
        }
        response = await self._execute(
            "create_product",
            lambda: self.client.table(self.table).insert(record).execute(),
        )
        if not response.data:
            raise StorageError("create_product returned no row")

        product = row_to_product(response.data[0])
        logger.info("product_created", product_id=product.id, url=url)
        return product

    async def count_for_owner(self, owner_uid: str) -> int:
        response = await self._execute(
            "count_for_owner",
            lambda: self.client.table(self.table)
            .select("id", count="exact")
            .eq("user_uid", owner_uid)
            .execute(),
        )
        return response.count or 0

    async def health_check(self) -> bool:
        """Check database connection

        Returns:
            True if connection is healthy
        """
        try:
            await self._execute(
                "health_check",
                lambda: self.client.table(self.table).select("id").limit(1).execute(),
            )
            logger.info("health_check_passed")
            return True
        except StorageError:
            return False
