from decimal import Decimal

from click.testing import CliRunner

from pricewatch import main
from pricewatch.domain.errors import StorageError, UnsupportedDomain
from pricewatch.domain.models import ExtractionResult, ItemOutcome, TickSummary

runner = CliRunner()


def _quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "configure_logging", lambda **kwargs: None)


def test_sites_command(monkeypatch):
    _quiet_logging(monkeypatch)

    result = runner.invoke(main.cli, ["sites"])

    assert result.exit_code == 0
    assert result.output.split() == [
        "amazon",
        "magazineluiza",
        "mercadolivre",
        "olx",
        "relogioonline",
    ]


def test_check_command(monkeypatch):
    _quiet_logging(monkeypatch)

    async def fake_check(config, url):
        return ExtractionResult(name="Kindle", price=Decimal("499.00"))

    monkeypatch.setattr(main, "check_url", fake_check)

    result = runner.invoke(main.cli, ["check", "https://www.amazon.com.br/dp/1"])

    assert result.exit_code == 0
    assert "Kindle" in result.output
    assert "499.00" in result.output


def test_check_command_unsupported(monkeypatch):
    _quiet_logging(monkeypatch)

    async def fake_check(config, url):
        raise UnsupportedDomain("ebay")

    monkeypatch.setattr(main, "check_url", fake_check)

    result = runner.invoke(main.cli, ["check", "https://ebay.com/itm/1"])

    assert result.exit_code == 1
    assert "unsupported_domain" in result.output


def test_tick_command_reports_failures(monkeypatch):
    _quiet_logging(monkeypatch)

    async def fake_tick(config):
        return TickSummary(
            outcomes=[
                ItemOutcome(product_id=1, status="success", price_dropped=True, notified=True),
                ItemOutcome(product_id=2, status="failure", error_kind="navigation_failed"),
            ]
        )

    monkeypatch.setattr(main, "run_single_tick", fake_tick)

    result = runner.invoke(main.cli, ["tick"])

    assert result.exit_code == 0
    assert "Checked 2 products: 1 ok, 1 failed, 1 price drops, 1 emails sent" in result.output
    assert "product 2: navigation_failed" in result.output


def test_tick_command_without_credentials(monkeypatch):
    _quiet_logging(monkeypatch)
    monkeypatch.setattr(main.settings, "supabase_url", None)
    monkeypatch.setattr(main.settings, "supabase_key", None)

    result = runner.invoke(main.cli, ["tick"])

    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert not isinstance(result.exception, ValueError)


def test_track_command_without_credentials(monkeypatch):
    _quiet_logging(monkeypatch)
    monkeypatch.setattr(main.settings, "supabase_url", None)
    monkeypatch.setattr(main.settings, "supabase_key", None)

    result = runner.invoke(
        main.cli,
        ["track", "https://www.amazon.com.br/dp/1", "--email", "a@b.com", "--owner", "uid-1"],
    )

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_tick_command_storage_failure(monkeypatch):
    _quiet_logging(monkeypatch)

    async def fake_tick(config):
        raise StorageError("list_stale failed: connection refused")

    monkeypatch.setattr(main, "run_single_tick", fake_tick)

    result = runner.invoke(main.cli, ["tick"])

    assert result.exit_code == 1
    assert "storage_failed" in result.output
