#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Base engine abstraction for TeX → MathML rendering.

An engine receives the whole page (HTML with delimited TeX), the renderer
configuration as JSON and the page language, and returns the page with math
converted.  Engines never raise from ``tex2mml()``: a failure is reported by
an inline error marker put in front of the unchanged page.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from typing import Optional

from wikimath.services.messages import MessageCatalog
from wikimath.services.output import PageOutput


# -----------------------------------------------------------------------------

# MathML produced on the server is shown by the browser directly.
MATHML_PAGE_STYLE = "math { font-size: 150%; }\nmath>semantics>annotation { display:none; }"


class BaseEngine(ABC):
    """Abstract base class for render engines."""

    name: str = "base"

    def __init__(self, messages: MessageCatalog) -> None:
        self.messages = messages

    @abstractmethod
    def tex2mml(self, html: str, config: str, lang: str) -> str:
        """Convert all math in *html*; on failure, prepend an error marker."""
        ...

    @abstractmethod
    def process_page(self, out: PageOutput) -> None:
        """Add engine-specific assets (styles) to the page."""
        ...

    @abstractmethod
    def browser_script_basename(self) -> str:
        """MathJax component loaded in the browser."""
        ...

    @abstractmethod
    def server_side_dir(self) -> Optional[str]:
        """Base URL of a self-hosted MathJax distribution."""
        ...

    def version(self) -> Optional[str]:
        """MathJax version in use, ``None`` if it cannot be told."""
        return None

    def close(self) -> None:
        """Release resources held by the engine."""

    def error_marker(self, key: str, *params: object, escape: bool = True) -> str:
        if escape:
            params = tuple(html.escape(str(p)) for p in params)
        return f'<span class="error">{self.messages.text(key, *params)}</span>'


# -----------------------------------------------------------------------------
