"""Command line entry point for pricewatch"""

import asyncio
import sys
from dataclasses import dataclass
from typing import Optional

import click

from pricewatch.core.config import Settings, settings
from pricewatch.core.logger import configure_logging, get_logger
from pricewatch.domain.errors import PriceWatchError
from pricewatch.scheduler import TrackerScheduler
from pricewatch.services.extractors import supported_domains
from pricewatch.services.gateway import RenderGateway
from pricewatch.services.notifier import PriceNotifier
from pricewatch.services.products import ProductService
from pricewatch.services.storage import SupabaseProductStore
from pricewatch.services.tracking import TrackingService
from pricewatch.services.utils import BrowserSessionManager

logger = get_logger(__name__)


@dataclass
class Runtime:
    """Wired collaborators for one process."""

    browser: BrowserSessionManager
    gateway: RenderGateway
    notifier: PriceNotifier
    store: Optional[SupabaseProductStore] = None

    def tracking(self, config: Settings) -> TrackingService:
        return TrackingService.from_settings(
            config, self.store, self.gateway, self.browser, notifier=self.notifier
        )

    def products(self, config: Settings) -> ProductService:
        return ProductService.from_settings(
            config, self.store, self.gateway, notifier=self.notifier
        )


def build_runtime(config: Settings, with_store: bool = True) -> Runtime:
    browser = BrowserSessionManager.from_settings(config)
    return Runtime(
        browser=browser,
        gateway=RenderGateway.from_settings(config, browser),
        notifier=PriceNotifier.from_settings(config),
        store=SupabaseProductStore() if with_store else None,
    )


async def run_service(config: Settings) -> None:
    runtime = build_runtime(config)
    scheduler = TrackerScheduler.from_settings(
        config, runtime.tracking(config), runtime.browser
    )
    if not runtime.notifier.is_configured():
        logger.warning("email_not_configured", detail="price drops will not be emailed")
    await scheduler.run_forever()


async def run_single_tick(config: Settings):
    runtime = build_runtime(config)
    try:
        return await runtime.tracking(config).run_tick()
    finally:
        await runtime.browser.close()


async def check_url(config: Settings, url: str):
    runtime = build_runtime(config, with_store=False)
    try:
        return await runtime.gateway.scrape(url)
    finally:
        await runtime.browser.close()


async def create_product(config: Settings, url: str, email: str, owner: str):
    runtime = build_runtime(config)
    try:
        return await runtime.products(config).create(url, email, owner)
    finally:
        await runtime.browser.close()


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: Optional[str]):
    """pricewatch - scheduled price tracking with drop alerts"""
    configure_logging(log_level=log_level.upper() if log_level else None)


@cli.command()
@click.option("--headless/--visible", default=None, help="Browser mode (default: settings)")
def run(headless: Optional[bool]):
    """Run the tracker on its schedule until interrupted"""
    if headless is not None:
        settings.scraper_headless = headless

    click.echo(
        f"Tracking every {settings.tracking_interval_seconds}s, "
        f"stale after {settings.staleness_threshold_minutes}min, "
        f"idle sweep every {settings.idle_sweep_interval_seconds}s"
    )
    try:
        asyncio.run(run_service(settings))
    except KeyboardInterrupt:
        click.echo("\nScheduler stopped by user")
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@cli.command()
def tick():
    """Run a single tracking tick and print its summary"""
    try:
        summary = asyncio.run(run_single_tick(settings))
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except PriceWatchError as e:
        click.echo(f"Tick failed ({e.kind}): {e}", err=True)
        sys.exit(1)

    click.echo(
        f"Checked {summary.total} products: {summary.succeeded} ok, "
        f"{summary.failed} failed, {summary.price_drops} price drops, "
        f"{summary.notifications_sent} emails sent"
    )
    for outcome in summary.outcomes:
        if not outcome.ok:
            click.echo(f"  product {outcome.product_id}: {outcome.error_kind}")


@cli.command()
@click.argument("url")
def check(url: str):
    """Scrape URL once and print its name and price"""
    try:
        result = asyncio.run(check_url(settings, url))
    except PriceWatchError as e:
        click.echo(f"Error ({e.kind}): {e}", err=True)
        sys.exit(1)

    click.echo(f"{result.name}\n  Price: {result.price}")


@cli.command()
@click.argument("url")
@click.option("--email", required=True, help="Owner email for price drop alerts")
@click.option("--owner", required=True, help="Owner identifier")
def track(url: str, email: str, owner: str):
    """Start tracking URL for an owner"""
    try:
        product = asyncio.run(create_product(settings, url, email, owner))
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except PriceWatchError as e:
        click.echo(f"Rejected ({e.kind}): {e}", err=True)
        sys.exit(1)

    click.echo(f"Tracking #{product.id}: {product.name} at {product.current_price}")


@cli.command()
def sites():
    """List supported sites (registrable domains)"""
    for domain in supported_domains():
        click.echo(domain)


@cli.command()
def test_config():
    """Test configuration loading"""
    click.echo("Configuration Test")
    click.echo(f"  Supabase URL: {(settings.supabase_url or '<unset>')[:30]}...")
    click.echo(f"  Headless: {settings.scraper_headless}")
    click.echo(f"  Navigation timeout: {settings.navigation_timeout_ms}ms")
    click.echo(f"  Tracking interval: {settings.tracking_interval_seconds}s")
    click.echo(f"  Staleness threshold: {settings.staleness_threshold_minutes}min")
    click.echo(f"  Idle sweep interval: {settings.idle_sweep_interval_seconds}s")
    click.echo(f"  Jitter: {settings.jitter_min_ms}-{settings.jitter_max_ms}ms")
    click.echo(f"  Max concurrent: {settings.max_concurrent or 'batch size'}")
    click.echo(f"  Email configured: {bool(settings.resend_api_key and settings.email_from)}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
def health():
    """Check database connection"""

    async def check_store():
        return await SupabaseProductStore().health_check()

    try:
        healthy = asyncio.run(check_store())
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if healthy:
        click.echo("Database connection healthy")
    else:
        click.echo("Database connection failed", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
