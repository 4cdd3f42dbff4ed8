#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Free TeX environments
=====================
``\\begin{equation}...\\end{equation}`` typed straight into wikitext, outside
any math tag, is treated as block math: the environment is wikified and
hidden behind a strip marker, to come back as ``$$\\begin{...}...\\end{...}$$``
at page assembly.  The marker cannot match again, and the restored text is
delimited math, which this pass screens, so re-running it is harmless.

Screened before matching:

  - no-math elements (``<pre>``, ``<code>``, ...)
  - ``<math>`` / ``<chem>`` tags and ``{{#tag:math|...}}`` calls
  - already delimited math (``\\(...\\)``, ``$$...$$``)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from wikimath.services.context import RenderContext
from wikimath.services.nomath import NoMathScanner
from wikimath.services.screen import Screenable, screen, unscreen
from wikimath.services.tags import delimiter_regex, find_parser_functions, xml_tag_regex
from wikimath.services.titles import TitleResolverProtocol
from wikimath.services.wikify import wikify_tex

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

def environment_regex(environments: Iterable[str]) -> Optional[re.Pattern[str]]:
    """``\\begin{ENV}...\\end{ENV}`` with the same ENV at both ends."""
    names = "|".join(re.escape(env) for env in environments if env)
    if not names:
        return None
    return re.compile(
        rf"\\begin\s*\{{({names})\}}(.+?)\\end\s*\{{\1\}}",
        re.IGNORECASE | re.DOTALL,
    )


# -----------------------------------------------------------------------------

class FreeEnvironmentDetector:

    def __init__(
        self,
        environments: Iterable[str],
        no_math: NoMathScanner,
        tag_names: Iterable[str],
        display_delimiters: tuple[str, str],
        delimiter_pairs: Iterable[Iterable[str]],
        resolver: TitleResolverProtocol,
    ) -> None:
        self._env_re = environment_regex(environments)
        self._open, self._close = display_delimiters
        self._resolver = resolver
        tag_names = list(tag_names)
        self._protected: list[Screenable] = [
            no_math,
            xml_tag_regex(tag_names),
            lambda text: ((t.start, t.end) for t in find_parser_functions(text, tag_names)),
        ]
        delimited = delimiter_regex(delimiter_pairs)
        if delimited is not None:
            self._protected.append(delimited)

    @property
    def enabled(self) -> bool:
        return self._env_re is not None

    def __call__(self, ctx: RenderContext, text: str) -> str:
        if self._env_re is None or not text:
            return text
        text, screened = screen(ctx, text, *self._protected)

        def _hide(m: re.Match) -> str:
            ctx.mark_math_needed(f"free environment {m.group(1)}")
            source = unscreen(m.group(0), screened)
            wikified = wikify_tex(ctx, source, self._resolver)
            return ctx.strip.add(f"{self._open}{wikified}{self._close}", kind="tex-free-environment")

        text, count = self._env_re.subn(_hide, text)
        if count:
            logger.debug("Hid %d free TeX environment(s)", count)
        return unscreen(text, screened)


# -----------------------------------------------------------------------------
