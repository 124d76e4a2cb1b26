"""Structured logging with rotating file handlers"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.stdlib import add_log_level, filter_by_level

from pricewatch.core.config import settings


def add_timestamp(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    """Add compact timestamp to log entries"""
    event_dict["timestamp"] = datetime.now().strftime("%H:%M:%S")
    return event_dict


def configure_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_dir: Optional[str] = None,
    to_file: Optional[bool] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 30,
) -> None:
    """Configure structured logging with an optional rotating file handler

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Format type ('json' or 'text')
        log_dir: Directory for log files (default: settings.log_dir)
        to_file: Write a rotating log file next to console output
        max_bytes: Maximum size per log file before rotation
        backup_count: Number of backup files to keep
    """
    level = getattr(logging, log_level or settings.log_level)
    format_type = log_format or settings.log_format
    write_file = settings.log_to_file if to_file is None else to_file

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    file_handler: Optional[RotatingFileHandler] = None
    if write_file:
        log_directory = Path(log_dir or settings.log_dir)
        log_directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_handler = RotatingFileHandler(
            log_directory / f"pricewatch_{timestamp}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    if file_handler:
        root_logger.addHandler(file_handler)

    if format_type == "json":
        file_renderer = console_renderer = structlog.processors.JSONRenderer()
    else:
        file_renderer = structlog.dev.ConsoleRenderer(colors=False, pad_event=30)
        console_renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event=30)

    def route_to_appropriate_handler(logger, method_name, event_dict):
        """Write colored output to console and plain output to file."""
        console_handler.stream.write(
            console_renderer(logger, method_name, event_dict.copy()) + "\n"
        )
        console_handler.stream.flush()

        if file_handler:
            file_handler.stream.write(
                file_renderer(logger, method_name, event_dict.copy()) + "\n"
            )
            file_handler.stream.flush()

        # Prevent stdlib logging from handling it again
        raise structlog.DropEvent

    processors = [
        filter_by_level,
        add_log_level,
        add_timestamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        route_to_appropriate_handler,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("tracking_tick_started", stale_products=10)
    """
    return structlog.get_logger(name)


def log_tick_summary(logger, summary) -> None:
    """Log the per-tick success/failure counts."""
    logger.info(
        "tracking_tick_completed",
        total=summary.total,
        succeeded=summary.succeeded,
        failed=summary.failed,
        price_drops=summary.price_drops,
        notifications_sent=summary.notifications_sent,
        duration_seconds=round(summary.duration_seconds, 2),
    )
