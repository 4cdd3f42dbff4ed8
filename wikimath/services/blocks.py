#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Block display
=============
Wiki authors indent a displayed formula with ``:``.  Such lines are rewritten
to block display, and a single punctuation mark following the formula is
pulled inside it::

    : <math>x</math>.              →  <math display="block">x.</math>
    :: {{#tag:math|x}},            →  {{#tag:math|x,|display="block"}}

Only bare ``<math>`` / ``<chem>`` tags are promoted; a tag that already
carries attributes is left alone, so the pass is idempotent.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from typing import Iterable

from wikimath.services.context import RenderContext
from wikimath.services.nomath import NoMathScanner
from wikimath.services.screen import screen, unscreen
from wikimath.services.tags import tag_alternation, template_end

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

# One punctuation mark, possibly after spaces or no-break spaces.
_PUNCTUATION = r"(?:[ \u00a0]*([.,:;]))?"
_PUNCTUATION_RE = re.compile(_PUNCTUATION)

_FLAGS = re.IGNORECASE | re.DOTALL


def block_tag_regex(tag_names: Iterable[str]) -> re.Pattern[str]:
    tag = tag_alternation(tag_names)
    return re.compile(rf"(?:^|\n)\s*(?::+\s*)+<({tag})>(.+?)</\1>{_PUNCTUATION}", _FLAGS)


def block_call_regex(tag_names: Iterable[str]) -> re.Pattern[str]:
    """Indented opening of ``{{#tag:math|``; the end of the call is brace-counted."""
    tag = tag_alternation(tag_names)
    return re.compile(rf"(?:^|\n)\s*(?::+\s*)+\{{\{{#tag:({tag})\|", _FLAGS)


def promote_calls(regex: re.Pattern[str], text: str) -> tuple[str, int]:
    pieces: list[str] = []
    pos = count = 0
    while True:
        m = regex.search(text, pos)
        if not m:
            break
        end = template_end(text, m.end())
        if end is None:
            break
        punctuation = _PUNCTUATION_RE.match(text, end)
        body = text[m.end():end - 2] + (punctuation.group(1) or "")
        pieces.append(text[pos:m.start()])
        pieces.append(f'\n{{{{#tag:{m.group(1)}|{body}|display="block"}}}}')
        pos = punctuation.end()
        count += 1
    pieces.append(text[pos:])
    return "".join(pieces), count


# -----------------------------------------------------------------------------

class BlockDisplayPromoter:

    def __init__(self, tag_names: Iterable[str], no_math: NoMathScanner) -> None:
        self._tag_re = block_tag_regex(tag_names)
        self._call_re = block_call_regex(tag_names)
        self._no_math = no_math

    def __call__(self, ctx: RenderContext, text: str) -> str:
        if not text:
            return text
        text, screened = screen(ctx, text, self._no_math)
        text, tags = self._tag_re.subn(r'\n<\1 display="block">\2\3</\1>', text)
        text, calls = promote_calls(self._call_re, text)
        if tags or calls:
            logger.debug("Promoted %d formula(e) to block display", tags + calls)
        return unscreen(text, screened)


# -----------------------------------------------------------------------------
