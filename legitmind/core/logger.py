"""
Logging setup shared by the API, store and gateway
"""
import logging
import sys

from legitmind.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Configure the root ``legitmind`` logger once and return it"""
    root = logging.getLogger("legitmind")
    root.setLevel(level.upper())

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    return root


logger = setup_logging()
