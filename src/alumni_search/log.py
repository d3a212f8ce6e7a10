"""loguru setup shared by the API and the CLI."""

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
