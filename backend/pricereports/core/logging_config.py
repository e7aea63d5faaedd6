"""Logging setup"""
import logging

from pricereports.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging() -> None:
    """Configure root logging once; debug output only in development."""
    level = settings.LOG_LEVEL
    if not level:
        level = "DEBUG" if settings.ENVIRONMENT == "development" else "INFO"
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL echo is too noisy even for development
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_attributes(logger: logging.Logger, attributes: dict) -> None:
    for key, value in attributes.items():
        logger.info("  > %s: %s", key, value)
