"""Centralized configuration using pydantic-settings"""

import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL")
    supabase_key: Optional[str] = Field(
        default=None, description="Supabase anon/service key"
    )
    products_table: str = Field(default="products", description="Tracked products table")

    # Browser
    scraper_headless: bool = Field(
        default=True, description="Run browser in headless mode"
    )
    navigation_timeout_ms: int = Field(
        default=30000, ge=1000, description="Page navigation timeout (ms)"
    )
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="domcontentloaded", description="Navigation lifecycle event to await"
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
        )
    )

    # Tracking cadence
    tracking_interval_seconds: int = Field(
        default=60, ge=1, description="Seconds between tracking ticks"
    )
    staleness_threshold_minutes: int = Field(
        default=7, ge=1, description="Re-check products older than this"
    )
    idle_sweep_interval_seconds: int = Field(
        default=300, ge=1, description="Seconds between idle browser sweeps"
    )

    # Anti-burst configuration
    jitter_min_ms: int = Field(default=1000, ge=0, description="Min jitter before a scrape")
    jitter_max_ms: int = Field(default=7000, ge=0, description="Max jitter before a scrape")
    max_concurrent: Optional[int] = Field(
        default=None, ge=1, description="Cap on concurrent scrapes (None = whole batch)"
    )

    # Product creation
    max_products_per_owner: int = Field(default=15, ge=1)

    # Email (Resend)
    resend_api_key: Optional[str] = Field(default=None, description="Resend API key")
    email_from: Optional[str] = Field(default=None, description="Sender address")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(
        default="text", description="Log output format"
    )
    log_dir: Path = Field(default=Path("logs"))
    log_to_file: bool = Field(default=True, description="Also write rotating log files")

    @field_validator("jitter_max_ms")
    @classmethod
    def validate_jitter(cls, v: int, info) -> int:
        """Ensure max >= min for jitter"""
        if "jitter_min_ms" in info.data and v < info.data["jitter_min_ms"]:
            raise ValueError("jitter_max_ms must be >= jitter_min_ms")
        return v

    @classmethod
    def load_from_json(cls, json_path: Path) -> "Settings":
        """Load settings from JSON config file"""
        with open(json_path, encoding="utf-8") as f:
            config_data = json.load(f)

        # Flatten nested JSON structure
        flat_config = {}

        if "browser" in config_data:
            browser = config_data["browser"]
            flat_config["scraper_headless"] = browser.get("headless", True)
            flat_config["navigation_timeout_ms"] = browser.get("timeout", 30000)
            flat_config["wait_until"] = browser.get("wait_until", "domcontentloaded")
            if "user_agent" in browser:
                flat_config["user_agent"] = browser["user_agent"]

        if "tracking" in config_data:
            tracking = config_data["tracking"]
            flat_config["tracking_interval_seconds"] = tracking.get("interval_seconds", 60)
            flat_config["staleness_threshold_minutes"] = tracking.get(
                "staleness_minutes", 7
            )
            flat_config["idle_sweep_interval_seconds"] = tracking.get(
                "idle_sweep_seconds", 300
            )
            flat_config["jitter_min_ms"] = tracking.get("jitter_min_ms", 1000)
            flat_config["jitter_max_ms"] = tracking.get("jitter_max_ms", 7000)
            flat_config["max_concurrent"] = tracking.get("max_concurrent")

        if "products" in config_data:
            flat_config["max_products_per_owner"] = config_data["products"].get(
                "max_per_owner", 15
            )

        if "debug" in config_data:
            flat_config["log_level"] = config_data["debug"].get("log_level", "INFO")

        return cls(**flat_config)

    @property
    def jitter_range_seconds(self) -> tuple[float, float]:
        """Jitter bounds converted to seconds"""
        return (self.jitter_min_ms / 1000, self.jitter_max_ms / 1000)


# Global settings instance
config_path = Path(__file__).parent.parent.parent / "config" / "pricewatch.json"
if config_path.exists():
    settings = Settings.load_from_json(config_path)
else:
    settings = Settings()
