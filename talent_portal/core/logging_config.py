"""
Logging setup - one call at process startup, plain stdlib logging.

Modules log through ``logging.getLogger(__name__)``; this only decides
level and format for the whole process.
"""

import logging

from talent_portal.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(settings: Settings) -> logging.Logger:
    """Configure the root logger from settings and return the service logger."""
    level = getattr(logging, settings.log_level.strip().upper(), None)
    if not isinstance(level, int):
        level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)

    # pymongo is chatty at DEBUG (heartbeats, pool events)
    logging.getLogger("pymongo").setLevel(max(level, logging.INFO))

    return logging.getLogger("talent_portal")
