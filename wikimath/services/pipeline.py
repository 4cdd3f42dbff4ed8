#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Math pipeline
=============
Turns the wikitext of one page into HTML ready for MathJax:

  1. block display     ``: <math>x</math>.`` → ``<math display="block">x.</math>``
  2. free environments ``\\begin{equation}...\\end{equation}`` outside tags
  3. tag rendering     ``<math>``, ``<chem>``, ``{{#tag:math|...}}`` → delimited
                       TeX or sanitised MathML behind strip markers
  4. unstrip
  5. page display      definitions block, engine pass, client script

Every step is a no-op on pages in negative namespaces and in the interface
message namespace.  ``render_page()`` never raises: on an internal error the
page text is returned unchanged.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
import time
from functools import cached_property, lru_cache
from typing import Callable, Iterable, Optional
from urllib.parse import urlsplit

from wikimath.core.config import Settings, get_settings
from wikimath.engines.base import BaseEngine
from wikimath.engines.select import select_engine
from wikimath.services.blocks import BlockDisplayPromoter
from wikimath.services.context import RenderContext
from wikimath.services.environments import FreeEnvironmentDetector
from wikimath.services.macros import definitions, has_definitions, mathjax_config_json, used_commands
from wikimath.services.messages import MessageCatalog
from wikimath.services.namespaces import Page
from wikimath.services.nomath import NoMathScanner
from wikimath.services.output import PageOutput
from wikimath.services.screen import screen, unscreen
from wikimath.services.tags import (
    TagOccurrence,
    classify,
    delimiter_regex,
    find_parser_functions,
    find_xml_tags,
    tag_alternation,
)
from wikimath.services.titles import TitleResolver, TitleResolverProtocol
from wikimath.services.wikify import wikify_mml, wikify_tex

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

VERSION_TTL = 3600
UNKNOWN_VERSION = "(unknown version)"


def _splice(text: str, occurrences: Iterable[TagOccurrence], render: Callable[[TagOccurrence], str]) -> str:
    pieces: list[str] = []
    pos = 0
    for occ in occurrences:
        pieces.append(text[pos:occ.start])
        pieces.append(render(occ))
        pos = occ.end
    pieces.append(text[pos:])
    return "".join(pieces)


# -----------------------------------------------------------------------------

class MathPipeline:

    def __init__(
        self,
        settings: Settings,
        messages: Optional[MessageCatalog] = None,
        resolver: Optional[TitleResolverProtocol] = None,
        engine: Optional[BaseEngine] = None,
    ) -> None:
        self.settings = settings
        self.messages = messages or MessageCatalog(settings.content_language)
        self.resolver = resolver or TitleResolver(settings.base_url, settings.article_path)
        self._engine = engine
        self._version: Optional[tuple[float, str]] = None

        self._tag_names = [settings.math_tag, settings.chem_tag]
        pairs = [*settings.inline_delimiters, *settings.display_delimiters]
        self._inline = tuple(settings.inline_delimiters[0])
        self._display = tuple(settings.display_delimiters[0])

        self._no_math = NoMathScanner(settings.skip_html_tags)
        self._promoter = BlockDisplayPromoter(self._tag_names, self._no_math)
        self._detector = FreeEnvironmentDetector(
            self.messages.as_list("environments"),
            self._no_math,
            self._tag_names,
            self._display,
            pairs,
            self.resolver,
        )

        # Anything that still looks like math in the finished page.
        delimited = delimiter_regex(pairs)
        math_re = rf"<(?:{tag_alternation(self._tag_names)})\b"
        if delimited is not None:
            math_re += "|" + delimited.pattern
        self._math_re = re.compile(math_re, re.IGNORECASE | re.DOTALL)

    @property
    def engine(self) -> BaseEngine:
        if self._engine is None:
            self._engine = select_engine(self.settings, self.messages)
        return self._engine

    @cached_property
    def config_json(self) -> str:
        return mathjax_config_json(self.settings, self.messages)

    # ── Wikitext passes ────────────────────────────────────────────────────

    def block_display(self, ctx: RenderContext, page: Page, text: str) -> str:
        if not text or not page.math_allowed:
            return text
        return self._promoter(ctx, text)

    def free_environments(self, ctx: RenderContext, page: Page, text: str) -> str:
        if not text or not page.math_allowed:
            return text
        return self._detector(ctx, text)

    def render_tags(self, ctx: RenderContext, page: Page, text: str) -> str:
        """Replace every math tag outside no-math regions by a strip marker."""
        if not text or not page.math_allowed:
            return text
        text, screened = screen(ctx, text, self._no_math)
        chem = self.settings.chem_tag.lower()

        def _render(occ: TagOccurrence) -> str:
            return ctx.strip.add(self.render_tag(ctx, occ.body, occ.args, chem=occ.name == chem))

        text = _splice(text, list(find_xml_tags(text, self._tag_names)), _render)
        text = _splice(text, list(find_parser_functions(text, self._tag_names)), _render)
        return unscreen(text, screened)

    def render_tag(self, ctx: RenderContext, body: str, args: dict[str, str], chem: bool = False) -> str:
        """Markup for one ``<math>`` / ``<chem>`` tag."""
        if chem:
            body = f"\\ce{{ {body} }}"
        fragment = classify(body, args, self.settings.mml_namespaces)
        ctx.mark_math_needed("chem tag" if chem else "math tag")
        if fragment.is_mml:
            mml_tag = self.settings.mml_tag
            mml = wikify_mml(fragment.body, self.resolver, self.settings.mml_tags_allowed)
            return f"<{mml_tag}{fragment.attributes}>{mml}</{mml_tag}>"
        open_, close = self._display if fragment.is_block else self._inline
        return f"{open_}{wikify_tex(ctx, fragment.body, self.resolver)}{close}"

    # ── Page display ───────────────────────────────────────────────────────

    def before_page_display(self, ctx: RenderContext, page: Page, out: PageOutput, lang: str) -> None:
        if not out.body or not page.math_allowed:
            return
        if self._math_re.search(out.body):
            ctx.mark_math_needed("math in page body")
        if not ctx.math_needed:
            return

        html = out.body
        if self.settings.add_wikilinks and not has_definitions(html):
            open_, close = self._display
            html = definitions(used_commands(html), open_, close, self.messages, self.resolver) + html
        out.body = self.engine.tex2mml(html, self.config_json, lang)
        self.engine.process_page(out)

        if self.settings.client_side:
            self.attach_if_not_yet(ctx, out, lang)

    def attach_if_not_yet(self, ctx: RenderContext, out: PageOutput, lang: str) -> None:
        """Configure MathJax and add its script to the page, once per render."""
        if ctx.already_attached:
            return
        out.add_inline_script(f"window.MathJax = {self.config_json};")
        if self.settings.use_cdn:
            base = self.settings.cdn_distribution
            domain = urlsplit(base).hostname
            if domain:
                for directive in ("script-src", "default-src"):
                    out.add_csp_source(directive, domain)
        else:
            base = self.engine.server_side_dir() or ""
        out.add_script_file(f"{base}/{self.engine.browser_script_basename()}?locale={lang}")
        ctx.already_attached = True

    # ── Entry points ───────────────────────────────────────────────────────

    def render_page(self, page: Page, text: str, lang: Optional[str] = None) -> PageOutput:
        lang = lang or self.settings.content_language
        ctx = RenderContext()
        out = PageOutput(body=text)
        try:
            if page.math_allowed:
                body = self.block_display(ctx, page, text)
                body = self.free_environments(ctx, page, body)
                body = self.render_tags(ctx, page, body)
                out.body = ctx.strip.unstrip(body)
            self.before_page_display(ctx, page, out, lang)
        except Exception:
            logger.exception("Math rendering failed on page %r", page.title)
            return PageOutput(body=text)
        out.math_needed = ctx.math_needed
        return out

    def version(self) -> str:
        """MathJax version reported by the engine, cached for an hour."""
        now = time.monotonic()
        if self._version is None or now - self._version[0] > VERSION_TTL:
            try:
                version = self.engine.version()
            except Exception:
                logger.exception("Cannot get MathJax version")
                version = None
            self._version = (now, version or UNKNOWN_VERSION)
        return self._version[1]


# -----------------------------------------------------------------------------

@lru_cache
def get_pipeline() -> MathPipeline:
    return MathPipeline(get_settings())


# -----------------------------------------------------------------------------
