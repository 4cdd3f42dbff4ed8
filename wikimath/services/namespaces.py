#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Namespace ids and the page identity the pipeline works on.

Math is never processed on virtual pages (negative ids: Special:, Media:) or
on interface messages (MediaWiki:), whatever the entry point.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass


# -----------------------------------------------------------------------------

NS_MEDIA = -2
NS_SPECIAL = -1
NS_MAIN = 0
NS_TALK = 1
NS_USER = 2
NS_USER_TALK = 3
NS_PROJECT = 4
NS_PROJECT_TALK = 5
NS_FILE = 6
NS_FILE_TALK = 7
NS_MEDIAWIKI = 8
NS_MEDIAWIKI_TALK = 9
NS_TEMPLATE = 10
NS_TEMPLATE_TALK = 11
NS_HELP = 12
NS_HELP_TALK = 13
NS_CATEGORY = 14
NS_CATEGORY_TALK = 15


# -----------------------------------------------------------------------------

def math_allowed(namespace: int) -> bool:
    return namespace >= 0 and namespace != NS_MEDIAWIKI


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Page:
    title: str
    namespace: int = NS_MAIN

    @property
    def math_allowed(self) -> bool:
        return math_allowed(self.namespace)


# -----------------------------------------------------------------------------
