#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; everything below the
``wikimath`` logger goes to one console handler.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging


# -----------------------------------------------------------------------------

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("wikimath")


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler to the ``wikimath`` logger tree (once)."""
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


# -----------------------------------------------------------------------------
