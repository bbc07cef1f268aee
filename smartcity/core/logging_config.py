"""Process-wide logging setup for the service entrypoints."""

import logging
import time

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_formatter() -> logging.Formatter:
    """Formatter whose timestamps are UTC, matching the trailing Z in LOG_DATE_FORMAT."""
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    formatter.converter = time.gmtime
    return formatter


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(utc_formatter())
        logging.basicConfig(level=level, handlers=[handler])
    root.setLevel(level)
