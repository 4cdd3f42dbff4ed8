#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Pick the render engine from configuration."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from wikimath.core.config import Settings
from wikimath.engines.base import BaseEngine
from wikimath.engines.client_side import ClientSideEngine
from wikimath.engines.local_process import LocalProcessEngine
from wikimath.engines.service import ServiceEngine
from wikimath.services.messages import MessageCatalog

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

def select_engine(settings: Settings, messages: MessageCatalog) -> BaseEngine:
    """Service if a service URL is set, else node.js if server-side, else the browser."""
    if settings.service_url:
        engine: BaseEngine = ServiceEngine(settings, messages)
    elif settings.server_side:
        engine = LocalProcessEngine(settings, messages)
    else:
        engine = ClientSideEngine(settings, messages)
    logger.info("MathJax engine: %s", engine.name)
    return engine


# -----------------------------------------------------------------------------
