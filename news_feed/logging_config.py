"""Logging setup for news_feed.

Log records go to stderr: stdout is owned by the MCP stdio transport.
"""

import logging
import sys
from typing import Optional

from news_feed.config import LOG_LEVELS, ServerConfig

LOGGER_NAME = "news_feed"


class ColorFormatter(logging.Formatter):
    """Formatter that colours the whole line by log level."""

    grey = "\x1b[37;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    dark_grey = "\x1b[30;1m"
    reset = "\x1b[0m"
    fmt = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"

    FORMATS = {
        logging.DEBUG: dark_grey + fmt + reset,
        logging.INFO: grey + fmt + reset,
        logging.WARNING: yellow + fmt + reset,
        logging.ERROR: red + fmt + reset,
        logging.CRITICAL: bold_red + fmt + reset,
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self.fmt)
        return logging.Formatter(log_fmt).format(record)


def setup_logging(config: Optional[ServerConfig] = None) -> logging.Logger:
    """Configure the package logger once.

    An unknown level falls back to INFO; validate_config reports it.

    Args:
        config: Optional server configuration supplying the log level

    Returns:
        The configured package logger
    """
    level = config.log_level if config else "INFO"
    if level not in LOG_LEVELS:
        level = "INFO"

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)

    if not any(getattr(h, "_news_feed_handler", False) for h in package_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorFormatter() if sys.stderr.isatty() else logging.Formatter(ColorFormatter.fmt))
        handler._news_feed_handler = True
        package_logger.addHandler(handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package hierarchy."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


logger = logging.getLogger(LOGGER_NAME)
