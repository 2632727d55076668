"""Logging bootstrap."""

import logging

from runlog.core.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the root logger once at application start-up.

    Args:
        settings: Application settings (defaults to cached settings).
    """
    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
