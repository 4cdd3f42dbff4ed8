#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Per-render state
================
Everything that used to be process-wide mutable state lives on a
``RenderContext`` created at the start of a page render and dropped at the end:

  - the screen / strip marker counter (monotonic, never reset within a render)
  - the "math needed" flag   (NOT_NEEDED → NEEDED, one way)
  - the "already attached" latch for the client script
  - the strip state holding rendered math until page assembly

Concurrent renders each get their own context, so nothing here is shared.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import itertools
import logging
import re
import sys
from dataclasses import dataclass, field
from typing import Iterator

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Strip state
# -----------------------------------------------------------------------------

# Same shape as MediaWiki strip markers; \x7f cannot occur in wikitext.
MARKER_PREFIX = "\x7f'\"`UNIQ-"
MARKER_SUFFIX = "-QINU`\"'\x7f"

_STRIP_MARKER_RE = re.compile(
    re.escape(MARKER_PREFIX) + r"-([a-z-]+)-([0-9A-F]{8})" + re.escape(MARKER_SUFFIX)
)


class StripState:
    """Holds finished output (rendered math) behind opaque markers.

    Text behind a marker is never seen by later regex passes; ``unstrip()``
    puts it back at page assembly.
    """

    def __init__(self, counter: Iterator[int]) -> None:
        self._counter = counter
        self._items: dict[str, str] = {}

    def add(self, content: str, kind: str = "math") -> str:
        marker = f"{MARKER_PREFIX}-{kind}-{next(self._counter):08X}{MARKER_SUFFIX}"
        self._items[marker] = content
        return marker

    def unstrip(self, text: str) -> str:
        # Stripped content can only refer to markers issued before it.
        def _restorer(limit: int):
            def _restore(m: re.Match) -> str:
                n = int(m.group(2), 16)
                content = self._items.get(m.group(0))
                if content is None or n >= limit:
                    return m.group(0)
                return _STRIP_MARKER_RE.sub(_restorer(n), content)
            return _restore
        return _STRIP_MARKER_RE.sub(_restorer(sys.maxsize), text)

    def __len__(self) -> int:
        return len(self._items)


# -----------------------------------------------------------------------------
# Render context
# -----------------------------------------------------------------------------

@dataclass
class RenderContext:
    math_needed: bool = False
    already_attached: bool = False
    _counter: Iterator[int] = field(default_factory=itertools.count, repr=False)
    strip: StripState = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.strip = StripState(self._counter)

    def next_marker(self) -> int:
        return next(self._counter)

    def mark_math_needed(self, reason: str) -> None:
        if not self.math_needed:
            logger.debug("Math needed: %s", reason)
        self.math_needed = True


# -----------------------------------------------------------------------------
