"""
Logging setup built on loguru.

Modules call ``get_logger(__name__)`` and log through the returned logger;
the CLI calls ``setup_logging`` once at startup to pick the level and sink.
"""

import os
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> "
    "<level>{level: <8}</level> "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)

logger.configure(extra={"component": "voicerelay"})


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Replace the default loguru sink with one at the requested level."""
    level = (level or os.getenv("VOICERELAY_LOG_LEVEL") or "INFO").upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)
    if log_file:
        logger.add(log_file, level="DEBUG", rotation="10 MB", retention=2)


def get_logger(name: str):
    """Return a logger tagged with the calling module's name."""
    return logger.bind(component=name)
