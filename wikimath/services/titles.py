#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Title resolution
================
Turns the target of ``[[Page|Alias]]`` / ``\\href{Page}{...}`` into wiki URLs.

``resolve()`` returns ``None`` for anything that cannot be a page title; the
wikifiers then show the literal alias instead of a link.  Existence of the
page is not checked.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import quote


# -----------------------------------------------------------------------------

# MediaWiki's illegal title characters, plus control characters.
_ILLEGAL_RE = re.compile(r"[<>\[\]{}|\x00-\x1f\x7f]")
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_SPACES_RE = re.compile(r"[\s_]+")

MAX_TITLE_LENGTH = 255


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Title:
    text: str
    fragment: str = ""

    @property
    def db_key(self) -> str:
        return self.text.replace(" ", "_")

    @classmethod
    def new_from_text(cls, raw: str) -> Optional["Title"]:
        text = html.unescape(raw).strip()
        if _SCHEME_RE.match(text):
            return None
        text, _, fragment = text.partition("#")
        text = _SPACES_RE.sub(" ", text).strip().lstrip(":").strip()
        if not text or len(text) > MAX_TITLE_LENGTH or _ILLEGAL_RE.search(text):
            return None
        return cls(text=text[0].upper() + text[1:], fragment=fragment.strip())

    def local_url(self, article_path: str = "/wiki/$1") -> str:
        url = article_path.replace("$1", quote(self.db_key, safe="/:~!$'()*,;@"))
        if self.fragment:
            url += "#" + quote(self.fragment.replace(" ", "_"), safe="/:~!$'()*,;@.")
        return url


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolvedTitle:
    title: Title
    full_url: str
    local_url: str


class TitleResolverProtocol(Protocol):
    def resolve(self, text: str) -> Optional[ResolvedTitle]: ...


# -----------------------------------------------------------------------------

class TitleResolver:
    """Resolve page titles against the wiki's article path."""

    def __init__(self, base_url: str = "", article_path: str = "/wiki/$1") -> None:
        self.base_url = base_url.rstrip("/")
        self.article_path = article_path

    def resolve(self, text: str) -> Optional[ResolvedTitle]:
        title = Title.new_from_text(text)
        if title is None:
            return None
        local = title.local_url(self.article_path)
        return ResolvedTitle(title=title, full_url=self.base_url + local, local_url=local)


# -----------------------------------------------------------------------------
