from __future__ import annotations

import logging
import sys

from .config import get_settings

# Libraries that log every statement or connection at DEBUG.
_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "asyncio")


def configure_logging() -> None:
    """Route application logs to stdout, verbose everywhere except production."""
    settings = get_settings()
    is_production = settings.environment == "production"

    logging.basicConfig(
        level=logging.INFO if is_production else logging.DEBUG,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]
