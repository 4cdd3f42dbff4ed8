#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Wikification
============
Rewrites wiki-style links inside formulae into the target markup's own
hyperlinks, then strips HTML.

TeX::

    \\href{Page}{alias}  /  [[Page|alias]]  /  [[Page]]
        → \\texttip{ \\href{ /wiki/Page }{ alias } }{ Page }

MathML::

    <maction actiontype="tooltip" href="Page">body</maction>  /  [[Page|alias]]
        → <maction actiontype="texttip" href="https://…/wiki/Page">alias<mtext>alias</mtext></maction>

A target that does not resolve to a title degrades to the plain alias (TeX)
or is left untouched (MathML).  Targets that already are URLs are never
treated as titles.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import Iterable, Optional

from wikimath.services.context import RenderContext
from wikimath.services.screen import screen, unscreen
from wikimath.services.titles import TitleResolverProtocol


# -----------------------------------------------------------------------------
# strip_tags
# -----------------------------------------------------------------------------

_COMMENT_RE = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)
_DECL_RE = re.compile(r"<[!?][^>]*>")
# A complete tag, or a "<" that would open one in the browser.
_TAG_RE = re.compile(r"<(/?)([A-Za-z][-A-Za-z0-9_:.]*)\b[^>]*>|<(?=[A-Za-z/!?])")
_TAG_OPEN_RE = re.compile(r"<(?=[A-Za-z/!?])")


def escape_tag_openers(text: str) -> str:
    """``<img`` → ``&lt;img``; ``a < b`` is left as it is."""
    return _TAG_OPEN_RE.sub("&lt;", text)


def _strip_tag(m: re.Match, keep: set[str]) -> str:
    if m.group(2) is None:
        return "&lt;"
    return m.group(0) if m.group(2).lower() in keep else ""


def strip_tags(text: str, allowed: Iterable[str] = ()) -> str:
    """Remove HTML tags, comments and declarations, keeping *allowed* tags.

    ``<`` not followed by a tag name (``a < b``) is text and survives.  A tag
    that is never closed (``<img src=x``) is escaped, so that later markup
    cannot complete it.
    """
    keep = {name.lower() for name in allowed}
    text = _COMMENT_RE.sub("", text)
    text = _DECL_RE.sub("", text)
    return _TAG_RE.sub(lambda m: _strip_tag(m, keep), text)


# -----------------------------------------------------------------------------
# TeX
# -----------------------------------------------------------------------------

# Commutative-diagram arrows (@>>>, @<<<) look like tags to strip_tags.
TAG_LIKE = (r">[^<>]*>[^<>]*>", r"<[^<>]*<[^<>]*<")
TAG_LIKE_RE = re.compile("|".join(TAG_LIKE))

# Local (/wiki/...) and absolute targets are already links.
_TEX_HREF_RE = re.compile(r"\\href\s*\{(?!\s*(?:http|/))(.+?)\}\s*\{(.+?)\}", re.IGNORECASE)
WIKILINK_RE = re.compile(r"\[\[(.+?)(?:\|(.*?))?\]\]")

TEX_WIKILINK = r"\texttip{ \href{ %(url)s }{ %(alias)s } }{ %(page)s }"


def tex_hyperlink(resolver: TitleResolverProtocol, page: str, alias: Optional[str] = None) -> str:
    title = resolver.resolve(page)
    alias = alias or page
    if title is None:
        return alias
    return TEX_WIKILINK % {"url": title.local_url, "alias": alias, "page": page}


def wikify_tex(ctx: RenderContext, tex: str, resolver: TitleResolverProtocol) -> str:
    """Resolve ``\\href{}{}`` and ``[[...]]`` in *tex*, then strip HTML."""
    wikified, screened = screen(ctx, tex, TAG_LIKE_RE)
    wikified = _TEX_HREF_RE.sub(
        lambda m: tex_hyperlink(resolver, m.group(1), m.group(2)), wikified
    )
    wikified = WIKILINK_RE.sub(
        lambda m: tex_hyperlink(resolver, m.group(1), m.group(2)), wikified
    )
    arrows = {n: escape_tag_openers(original) for n, original in screened.items()}
    return unscreen(strip_tags(wikified), arrows)


# -----------------------------------------------------------------------------
# MathML
# -----------------------------------------------------------------------------

_MML_TOOLTIP_RE = re.compile(
    r'<maction\s+actiontype\s*=\s*"tooltip"\s+href\s*=\s*"(?!http)(.+?)"\s*>\s*(.+?)</maction>',
    re.IGNORECASE | re.DOTALL,
)


def _mml_link(resolver: TitleResolverProtocol, m: re.Match) -> str:
    title = resolver.resolve(m.group(1))
    if title is None:
        return m.group(0)
    alias = m.group(2) or m.group(1)
    return (
        f'<maction actiontype="texttip" href="{title.full_url}">'
        f"\n{alias}"
        f"\n<mtext>{alias}</mtext>\n</maction>"
    )


def wikify_mml(mml: str, resolver: TitleResolverProtocol, allowed_tags: Iterable[str]) -> str:
    """Resolve tooltip hrefs and ``[[...]]`` in *mml*, then drop non-MathML tags."""
    mml = _MML_TOOLTIP_RE.sub(lambda m: _mml_link(resolver, m), mml)
    mml = WIKILINK_RE.sub(lambda m: _mml_link(resolver, m), mml)
    return strip_tags(mml, allowed_tags)


# -----------------------------------------------------------------------------
