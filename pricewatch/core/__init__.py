"""Core module - Configuration and logging"""

from pricewatch.core.config import Settings, settings
from pricewatch.core.logger import configure_logging, get_logger

__all__ = ["Settings", "settings", "configure_logging", "get_logger"]
