"""
Logging setup shared by the API process and the maintenance scripts.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Client libraries that log each outbound call; the Hostaway client does that itself.
_CHATTY_LOGGERS = ("httpx", "httpcore", "firebase_admin")


def configure_logging(level: str = "INFO") -> None:
    """Send records to stdout in ``time | level | logger | message`` form."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stdout)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["LOG_FORMAT", "configure_logging"]
