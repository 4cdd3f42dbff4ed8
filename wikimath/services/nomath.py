#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
No-math regions
===============
Finds HTML elements inside which math must never be recognised (``<pre>``,
``<code>``, ``<nowiki>``, ...), so they can be screened before the block
display and free environment passes.

Python's ``re`` has no recursion, so this is a small scanner over tag
boundaries that keeps a stack of open elements.  An element is matched only
when it is balanced:

  - an opening tag (not self-closing) of a listed name
  - content, in which
      * a nested element of *any* listed name must itself be balanced
        (same-name nesting included: ``<pre><pre></pre></pre>``)
      * a self-closing listed tag (``<code/>``) is skipped
      * any other ``<`` is plain text, commutative-diagram arrows
        (``>>>``, ``<<<``) included
  - the closing tag of the same name

Unbalanced openings are not screened.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional


# -----------------------------------------------------------------------------

class NoMathScanner:

    def __init__(self, tags: Iterable[str]) -> None:
        names = [re.escape(t) for t in tags if t]
        self.enabled = bool(names)
        alt = "|".join(names) or r"(?!)"
        self._open_re = re.compile(rf"<({alt})(?=[\s/>])[^>]*?(?<!/)>", re.IGNORECASE)
        self._self_closing_re = re.compile(rf"<({alt})(?=[\s/>])[^>]*/>", re.IGNORECASE)
        self._close_re = re.compile(r"</([^\s>]+)\s*>")

    def __call__(self, text: str) -> Iterator[tuple[int, int]]:
        return self.spans(text)

    def spans(self, text: str) -> Iterator[tuple[int, int]]:
        """Non-overlapping ``(start, end)`` spans of balanced no-math elements."""
        if not self.enabled:
            return
        unbalanced: set[int] = set()
        pos = 0
        while True:
            m = self._open_re.search(text, pos)
            if not m:
                return
            end = None if m.start() in unbalanced else self._element_end(text, m, unbalanced)
            if end is None:
                pos = m.end()
                continue
            yield m.start(), end
            pos = end

    def _element_end(self, text: str, opening: re.Match, unbalanced: set[int]) -> Optional[int]:
        """End of the element opened by *opening*, or None if it never closes.

        Openings still unclosed at the end of the text are added to
        *unbalanced*: scanned on their own they would fail the same way.
        """
        stack = [(opening.group(1).lower(), opening.start())]
        i = opening.end()
        while True:
            lt = text.find("<", i)
            if lt < 0:
                unbalanced.update(start for _, start in stack)
                return None

            close = self._close_re.match(text, lt)
            if close:
                i = close.end()
                if close.group(1).lower() == stack[-1][0]:
                    stack.pop()
                    if not stack:
                        return i
                continue

            single = self._self_closing_re.match(text, lt)
            if single:
                i = single.end()
                continue

            nested = self._open_re.match(text, lt)
            if nested:
                stack.append((nested.group(1).lower(), lt))
                i = nested.end()
                continue

            i = lt + 1


# -----------------------------------------------------------------------------
