"""Tests for PriceNotifier and email templates."""

import json
from decimal import Decimal

import httpx
import pytest

from pricewatch.domain.errors import NotificationFailed
from pricewatch.services.email_templates import price_drop_html, product_added_html
from pricewatch.services.notifier import PriceNotifier

URL = "https://www.amazon.com.br/dp/B0TEST"


def _make_notifier(status: int = 200, requests: list = None, **kwargs) -> PriceNotifier:
    """Build a notifier backed by httpx.MockTransport."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status, json={"id": "email_123"})

    kwargs.setdefault("api_key", "re_test")
    kwargs.setdefault("from_email", "alerts@example.com")
    return PriceNotifier(transport=httpx.MockTransport(handler), **kwargs)


class TestPriceNotifier:
    """Tests for PriceNotifier class."""

    @pytest.mark.asyncio
    async def test_price_drop_email_payload(self) -> None:
        requests = []
        notifier = _make_notifier(requests=requests)

        await notifier.send_price_drop_email(
            "ana@example.com", "Kindle", Decimal("100"), Decimal("90"), URL
        )

        assert len(requests) == 1
        request = requests[0]
        assert request.headers["Authorization"] == "Bearer re_test"
        payload = json.loads(request.content)
        assert payload["from"] == "alerts@example.com"
        assert payload["to"] == ["ana@example.com"]
        assert payload["subject"] == "Price change for one of your products: Kindle"
        assert "$100" in payload["html"]
        assert "$90" in payload["html"]

    @pytest.mark.asyncio
    async def test_product_added_email(self) -> None:
        requests = []
        notifier = _make_notifier(requests=requests)

        await notifier.send_product_added_email("ana@example.com", "Kindle", Decimal("499"), URL)

        payload = json.loads(requests[0].content)
        assert payload["subject"] == "Now tracking: Kindle"

    @pytest.mark.asyncio
    async def test_rejected_response_raises(self) -> None:
        notifier = _make_notifier(status=422)

        with pytest.raises(NotificationFailed):
            await notifier.send_price_drop_email(
                "ana@example.com", "Kindle", Decimal("100"), Decimal("90"), URL
            )

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        notifier = PriceNotifier(
            "re_test", "alerts@example.com", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(NotificationFailed):
            await notifier.send_product_added_email("ana@example.com", "Kindle", Decimal("1"), URL)

    @pytest.mark.asyncio
    async def test_unconfigured_raises_without_request(self) -> None:
        requests = []
        notifier = _make_notifier(requests=requests, api_key=None)

        assert not notifier.is_configured()
        with pytest.raises(NotificationFailed):
            await notifier.send_price_drop_email(
                "ana@example.com", "Kindle", Decimal("100"), Decimal("90"), URL
            )
        assert requests == []


class TestTemplates:
    """Tests for HTML bodies."""

    def test_price_drop_shows_difference(self) -> None:
        html = price_drop_html("Kindle", Decimal("100.00"), Decimal("90.50"), URL)

        assert "Price Change Alert" in html
        assert "$9.50" in html
        assert f'href="{URL}"' in html

    def test_names_are_escaped(self) -> None:
        html = product_added_html("<script>x</script>", Decimal("1"), URL)

        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html
