# backoffice/core/logger.py
"""
Shared application logger
"""
import logging
import sys

from backoffice.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Configure the root handler once and return the application logger."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level.upper())
    return logging.getLogger("backoffice")


logger = setup_logging()
