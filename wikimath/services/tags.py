#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Math tags
=========
Finding ``<math>`` / ``<chem>`` tags and ``{{#tag:math|...}}`` calls in
wikitext, parsing their attributes, and classifying the content:

  - MathML  when ``xmlns`` is one of the configured MathML namespaces
  - block   when ``display="block"`` (``inline`` and no attribute: inline)

Attribute parsing is permissive: unknown attributes and junk are dropped,
never reported.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


# -----------------------------------------------------------------------------

class MathKind(str, Enum):
    TEX = "tex"
    MATHML = "mathml"


class Display(str, Enum):
    INLINE = "inline"
    BLOCK = "block"


@dataclass(frozen=True)
class MathFragment:
    kind: MathKind
    display: Display
    body: str
    attributes: str = ""

    @property
    def is_mml(self) -> bool:
        return self.kind is MathKind.MATHML

    @property
    def is_block(self) -> bool:
        return self.display is Display.BLOCK


# -----------------------------------------------------------------------------
# Attributes
# -----------------------------------------------------------------------------

_ATTR_RE = re.compile(
    r"""([A-Za-z_:][-A-Za-z0-9_:.]*)          # name
        (?:\s*=\s*
            (?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+))  # value
        )?""",
    re.VERBOSE,
)


def parse_attributes(raw: str | None) -> dict[str, str]:
    """``' xmlns="..." display=block'`` → ``{"xmlns": "...", "display": "block"}``.

    Names are lower-cased, values entity-decoded; the first occurrence of a
    name wins.
    """
    args: dict[str, str] = {}
    if not raw:
        return args
    for m in _ATTR_RE.finditer(raw):
        name = m.group(1).lower()
        value = next((g for g in m.group(2, 3, 4) if g is not None), "")
        args.setdefault(name, html.unescape(value).strip())
    return args


def classify(body: str, args: dict[str, str], mml_namespaces: Iterable[str]) -> MathFragment:
    is_mml = args.get("xmlns") in set(mml_namespaces)
    display = args.get("display")
    attributes = f' xmlns="{args["xmlns"]}"' if is_mml else ""
    if display in ("block", "inline"):
        attributes += f' display="{display}"'
    return MathFragment(
        kind=MathKind.MATHML if is_mml else MathKind.TEX,
        display=Display.BLOCK if display == "block" else Display.INLINE,
        body=body,
        attributes=attributes,
    )


# -----------------------------------------------------------------------------
# Locating tags in wikitext
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TagOccurrence:
    start: int
    end: int
    name: str
    body: str
    args: dict[str, str]


def tag_alternation(names: Iterable[str]) -> str:
    return "|".join(re.escape(n) for n in names if n)


def xml_tag_regex(names: Iterable[str]) -> re.Pattern[str]:
    """``<math attrs>body</math>`` and ``<math attrs/>`` for any of *names*."""
    alt = tag_alternation(names)
    return re.compile(
        rf"<({alt})(\s[^>]*?)?(?:/>|>(.*?)</\1\s*>)",
        re.IGNORECASE | re.DOTALL,
    )


def parser_function_regex(names: Iterable[str]) -> re.Pattern[str]:
    """Opening of ``{{#tag:math|``; the end is found by ``template_end()``."""
    return re.compile(rf"\{{\{{\s*#tag:\s*({tag_alternation(names)})\s*\|", re.IGNORECASE)


def template_end(text: str, pos: int) -> int | None:
    """Index just past the ``}}`` closing a template whose body starts at *pos*.

    Single braces are counted, so balanced TeX groups like ``\\frac{a}{b}``
    inside the call do not end it early.
    """
    depth = 2
    i = pos
    while i < len(text):
        c = text[i]
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def _split_top_level(inner: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    buf: list[str] = []
    for c in inner:
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        if c == "|" and depth == 0:
            parts.append("".join(buf))
            buf = []
        else:
            buf.append(c)
    parts.append("".join(buf))
    return parts


_NAMED_ARG_RE = re.compile(r"^\s*([A-Za-z_:][-A-Za-z0-9_:.]*)\s*=(.*)$", re.DOTALL)


def find_xml_tags(text: str, names: Iterable[str]) -> Iterator[TagOccurrence]:
    for m in xml_tag_regex(names).finditer(text):
        yield TagOccurrence(
            start=m.start(),
            end=m.end(),
            name=m.group(1).lower(),
            body=m.group(3) or "",
            args=parse_attributes(m.group(2)),
        )


def find_parser_functions(text: str, names: Iterable[str]) -> Iterator[TagOccurrence]:
    """``{{#tag:math|body|display="block"}}``.

    Pieces after the body that are not ``name=value`` are glued back onto the
    body (a bare ``|`` is legal TeX).
    """
    regex = parser_function_regex(names)
    pos = 0
    while True:
        m = regex.search(text, pos)
        if not m:
            return
        end = template_end(text, m.end())
        if end is None:
            return
        parts = _split_top_level(text[m.end():end - 2])
        body_parts = [parts[0]]
        args: dict[str, str] = {}
        for part in parts[1:]:
            named = _NAMED_ARG_RE.match(part)
            if named:
                args.setdefault(named.group(1).lower(), parse_attributes(f'v={named.group(2).strip()}').get("v", ""))
            else:
                body_parts.append(part)
        yield TagOccurrence(
            start=m.start(),
            end=end,
            name=m.group(1).lower(),
            body="|".join(body_parts),
            args=args,
        )
        pos = end


# -----------------------------------------------------------------------------
# Delimited math (already converted, or typed by hand)
# -----------------------------------------------------------------------------

def delimiter_regex(pairs: Iterable[Iterable[str]]) -> re.Pattern[str] | None:
    """``\\(...\\)``, ``$$...$$`` and whatever other delimiter pairs are configured."""
    options = [re.escape(open_) + ".+?" + re.escape(close) for open_, close in pairs]
    if not options:
        return None
    return re.compile("|".join(options), re.DOTALL)


# -----------------------------------------------------------------------------
