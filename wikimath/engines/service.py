#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Service engine: POST the page to a MathJax rendering service.

The configuration travels in the body, ahead of the page, as
``<script type="text/json">...</script>``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from html import escape
from typing import Optional

import httpx

from wikimath.core.config import Settings
from wikimath.engines.base import MATHML_PAGE_STYLE, BaseEngine
from wikimath.services.messages import MessageCatalog
from wikimath.services.output import PageOutput

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class ServiceEngine(BaseEngine):
    """Render TeX with a remote MathJax service."""

    name = "service"

    def __init__(
        self,
        settings: Settings,
        messages: MessageCatalog,
        client: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__(messages)
        self.settings = settings
        self.service_url = settings.service_url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=settings.engine_timeout)

    def tex2mml(self, html: str, config: str, lang: str) -> str:
        params = {"config": "yes", "display": "inline", "lang": lang}
        try:
            response = self._client.post(
                self.service_url,
                params=params,
                content=f'<script type="text/json">{config}</script>{html}'.encode("utf-8"),
            )
        except httpx.HTTPError as exc:
            logger.warning("MathJax service %s unavailable: %s", self.service_url, exc)
            return self.error_marker("mathjax-service-unavailable", self.service_url, exc) + html

        if response.is_success:
            return response.text
        logger.warning("MathJax service %s returned %d", self.service_url, response.status_code)
        return self.error_marker(
            "mathjax-broken-tex", f"{response.status_code}<br />{escape(response.text)}", escape=False
        ) + html

    def process_page(self, out: PageOutput) -> None:
        out.add_inline_style(MATHML_PAGE_STYLE)

    def browser_script_basename(self) -> str:
        return "mml-chtml.js"

    def server_side_dir(self) -> Optional[str]:
        return self.settings.service_external_url or None

    def version(self) -> Optional[str]:
        url = self.settings.service_version_url
        if not url:
            return None
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            logger.debug("MathJax service version unavailable: %s", exc)
            return None
        return response.text.strip() if response.is_success else None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


# -----------------------------------------------------------------------------
