"""
Centralized logging configuration for StampCard.

This module provides card-aware logging: every log record carries the
identifier of the stamp whose card produced it. Several cards can be
loading at once inside one event loop, so the identifier is tracked in a
context variable (task-local under asyncio) rather than in thread names.

Features:
    - Automatic stamp identifier in all log messages
    - Console output (always enabled)
    - Rotating file logs (optional, for production)
    - Separate error log for ERROR/CRITICAL messages
    - Helper functions for getting loggers with consistent naming

Log Format:
    2026-10-18 10:15:30 [INFO    ] [-] stamp_card.app - Starting application
    2026-10-18 10:15:31 [DEBUG   ] [A1234567] stamp_card.services.data_loader - Fetch started (generation 3)
    2026-10-18 10:15:31 [WARNING ] [A1234567] stamp_card.services.clipboard_notifier - Clipboard write failed

Usage:
    # At application startup
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)

    # Around work for one card
    with card_context(stamp_id):
        logger.info("Loading")
"""

import contextvars
import logging
import sys
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional


_current_stamp_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    "stamp_card_current_stamp_id", default="-"
)


# =============================================================================
# CARD CONTEXT FILTER
# =============================================================================

class CardContextFilter(logging.Filter):
    """
    Logging filter that adds the current stamp identifier to log records.

    Adds one attribute, stamp_id, used by the format string. Records
    emitted outside any card context get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.stamp_id = _current_stamp_id.get()
        return True


@contextmanager
def card_context(stamp_id: str) -> Iterator[None]:
    """
    Tag every log record emitted inside the block with stamp_id.

    Args:
        stamp_id: Identifier of the card doing the work
    """
    token = _current_stamp_id.set(stamp_id or "-")
    try:
        yield
    finally:
        _current_stamp_id.reset(token)


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    app_name: str = "stamp_card",
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure application logging with card context.

    This sets up:
    1. Console handler (always enabled) - for immediate feedback
    2. Rotating file handler (optional) - for persistent logs
    3. Error file handler (optional) - for ERROR/CRITICAL only
    4. Card context filter - adds the stamp identifier to all messages

    Args:
        app_name: Name of the root logger (default: "stamp_card")
        log_level: Minimum log level (default: INFO)
        log_dir: Directory for log files (default: ./logs relative to this file)
        enable_file_logging: Whether to write to log files (default: True)

    Returns:
        Configured root logger instance
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allows re-configuration (e.g., tests creating several apps)
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(stamp_id)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    card_filter = CardContextFilter()

    # ---------------------------------------------------------------------
    # Console Handler (always enabled)
    # ---------------------------------------------------------------------
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(card_filter)
    logger.addHandler(console_handler)

    # ---------------------------------------------------------------------
    # File Handlers (optional)
    # ---------------------------------------------------------------------
    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB per file
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(card_filter)
        logger.addHandler(file_handler)

        error_log_file = log_dir / f"{app_name}_error.log"
        error_handler = RotatingFileHandler(
            filename=error_log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(card_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


# =============================================================================
# LOGGER FACTORY
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the "stamp_card" namespace.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance inheriting handlers from setup_logging()

    Example:
        # In services/data_loader.py
        logger = get_logger(__name__)
        # Logger name: "stamp_card.services.data_loader"
    """
    if not name.startswith("stamp_card"):
        name = f"stamp_card.{name}"
    return logging.getLogger(name)
