#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Client-side engine: TeX is left for MathJax in the browser."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Optional

from wikimath.core.config import Settings
from wikimath.engines.base import BaseEngine
from wikimath.services.messages import MessageCatalog
from wikimath.services.output import PageOutput


# -----------------------------------------------------------------------------

class ClientSideEngine(BaseEngine):

    name = "client-side"

    def __init__(self, settings: Settings, messages: MessageCatalog) -> None:
        super().__init__(messages)
        self.settings = settings

    def tex2mml(self, html: str, config: str, lang: str) -> str:
        return html

    def process_page(self, out: PageOutput) -> None:
        pass

    def browser_script_basename(self) -> str:
        return "tex-mml-chtml.js"

    def server_side_dir(self) -> Optional[str]:
        return f"{self.settings.extension_assets_path}{self.settings.local_distribution}"


# -----------------------------------------------------------------------------
