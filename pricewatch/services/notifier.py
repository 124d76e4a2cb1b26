"""Email notifications via Resend API."""

from decimal import Decimal
from typing import Optional, Protocol

import httpx

from pricewatch.core.config import Settings
from pricewatch.core.constants import EMAIL_TIMEOUT_SECONDS, RESEND_API_URL
from pricewatch.core.logger import get_logger
from pricewatch.domain.errors import NotificationFailed
from pricewatch.services.email_templates import price_drop_html, product_added_html

logger = get_logger(__name__)


class Notifier(Protocol):
    async def send_price_drop_email(
        self,
        to: str,
        product_name: str,
        old_price: Decimal,
        new_price: Decimal,
        url: str,
    ) -> None: ...


class PriceNotifier:
    """Send price alerts via Resend email API."""

    def __init__(
        self,
        api_key: Optional[str],
        from_email: Optional[str],
        api_url: str = RESEND_API_URL,
        timeout: float = EMAIL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "PriceNotifier":
        return cls(settings.resend_api_key, settings.email_from, **kwargs)

    def is_configured(self) -> bool:
        return bool(self.api_key and self.from_email)

    async def send_price_drop_email(
        self,
        to: str,
        product_name: str,
        old_price: Decimal,
        new_price: Decimal,
        url: str,
    ) -> None:
        """Send price drop alert email."""
        subject = f"Price change for one of your products: {product_name}"
        html_body = price_drop_html(product_name, old_price, new_price, url)
        await self._send_email(to, subject, html_body)

    async def send_product_added_email(
        self, to: str, product_name: str, price: Decimal, url: str
    ) -> None:
        """Send tracking confirmation email."""
        subject = f"Now tracking: {product_name}"
        html_body = product_added_html(product_name, price, url)
        await self._send_email(to, subject, html_body)

    async def _send_email(self, to: str, subject: str, html_body: str) -> None:
        if not self.is_configured():
            raise NotificationFailed("Email service not configured (missing API key or sender)")

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self.from_email,
                        "to": [to],
                        "subject": subject,
                        "html": html_body,
                    },
                )
        except httpx.HTTPError as e:
            logger.error("email_send_error", to=to, error=str(e))
            raise NotificationFailed(f"Email send error: {e}") from e

        if not response.is_success:
            logger.error(
                "email_send_rejected",
                to=to,
                status=response.status_code,
                body=response.text[:200],
            )
            raise NotificationFailed(f"Failed to send email: {response.status_code}")

        logger.info("email_sent", to=to, subject=subject[:50])
