"""Logging setup shared by the server entry points."""

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once.

    The level defaults to ``settings.log_level``.
    """
    level_name = (level or settings.log_level.value).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT, level=numeric_level)
    root.setLevel(numeric_level)
