"""
Logging setup.

Modules log through `logging.getLogger(__name__)`; this only decides
the format and level once, at startup.
"""

from __future__ import annotations

import logging
import sys

from bugbounty.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure the root logger from settings."""
    root = logging.getLogger()
    level = logging.DEBUG if settings.debug and not settings.is_production else settings.log_level.upper()

    if not any(getattr(h, "_bugbounty", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._bugbounty = True
        root.addHandler(handler)

    root.setLevel(level)

    # Uvicorn's access log duplicates the request log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
