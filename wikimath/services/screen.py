#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Screen / unscreen
=================
Protect substrings from intervening regex passes by swapping them for
``&&&&N&&&&`` placeholders, then put them back.

``screen()`` accepts compiled regexes, pattern strings, or any callable that
returns ``(start, end)`` spans (used for the balanced no-math scanner, which a
flat regex cannot express).  Patterns are applied first-to-last; a later
pattern may swallow placeholders produced by an earlier one and ``unscreen()``
restores such nesting fully.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
import sys
from typing import Callable, Iterable, Union

from wikimath.services.context import RenderContext


# -----------------------------------------------------------------------------

SpanFinder = Callable[[str], Iterable[tuple[int, int]]]
Screenable = Union[str, "re.Pattern[str]", SpanFinder]

_PLACEHOLDER_RE = re.compile(r"&&&&(\d+)&&&&")


def placeholder(n: int) -> str:
    return f"&&&&{n}&&&&"


# -----------------------------------------------------------------------------

def _spans(pattern: Screenable, text: str) -> list[tuple[int, int]]:
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    if isinstance(pattern, re.Pattern):
        return [m.span() for m in pattern.finditer(text) if m.end() > m.start()]
    return [span for span in pattern(text) if span[1] > span[0]]


def screen(ctx: RenderContext, text: str, *patterns: Screenable) -> tuple[str, dict[int, str]]:
    """Replace every match of every pattern with a numbered placeholder.

    Returns the screened text and the ``{marker id: original}`` map that
    ``unscreen()`` needs.  Marker ids come from *ctx*, so several screen rounds
    within one render never collide.
    """
    screened: dict[int, str] = {}
    for pattern in patterns:
        pieces: list[str] = []
        pos = 0
        for start, end in _spans(pattern, text):
            n = ctx.next_marker()
            screened[n] = text[start:end]
            pieces.append(text[pos:start])
            pieces.append(placeholder(n))
            pos = end
        pieces.append(text[pos:])
        text = "".join(pieces)
    return text, screened


def unscreen(text: str, screened: dict[int, str]) -> str:
    """Put screened substrings back.  Unknown placeholders are left alone."""
    if not screened:
        return text

    # A screened substring can only contain placeholders issued before it.
    def _restorer(limit: int) -> Callable[[re.Match], str]:
        def _restore(m: re.Match) -> str:
            n = int(m.group(1))
            original = screened.get(n)
            if original is None or n >= limit:
                return m.group(0)
            return _PLACEHOLDER_RE.sub(_restorer(n), original)
        return _restore

    return _PLACEHOLDER_RE.sub(_restorer(sys.maxsize), text)


# -----------------------------------------------------------------------------
