#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Message catalog
===============
Localised configuration lists and user-visible messages, looked up in the
content language with English as the fallback.

Catalogs are JSON files under ``wikimath/i18n/``.  A missing message is not an
error: ``text()`` returns ``""`` and ``as_list()`` returns ``[]``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

I18N_DIR = Path(__file__).resolve().parent.parent / "i18n"
FALLBACK_LANGUAGE = "en"
MSG_PREFIX = "mathjax"

_PARAM_RE = re.compile(r"\$(\d+)")
_LIST_SEP_RE = re.compile(r"\s*,\s*")


# -----------------------------------------------------------------------------

def _load_catalog(directory: Path, lang: str) -> dict[str, str]:
    path = directory / f"{lang}.json"
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Cannot read message catalog %s: %s", path, exc)
        return {}
    return {k: v for k, v in data.items() if not k.startswith("@") and isinstance(v, str)}


class MessageCatalog:

    def __init__(
        self,
        lang: str = FALLBACK_LANGUAGE,
        directory: Path = I18N_DIR,
        overrides: Optional[dict[str, str]] = None,
    ) -> None:
        self.lang = lang
        self._messages = _load_catalog(directory, FALLBACK_LANGUAGE)
        if lang != FALLBACK_LANGUAGE:
            self._messages.update(_load_catalog(directory, lang))
        if overrides:
            self._messages.update(overrides)

    @classmethod
    def from_dict(cls, messages: dict[str, str], lang: str = FALLBACK_LANGUAGE) -> "MessageCatalog":
        """Catalog built only from *messages* (no files)."""
        catalog = cls.__new__(cls)
        catalog.lang = lang
        catalog._messages = dict(messages)
        return catalog

    def exists(self, key: str) -> bool:
        return key in self._messages

    def text(self, key: str, *params: object) -> str:
        """Message text with ``$1``, ``$2``... replaced by *params*."""
        msg = self._messages.get(key)
        if msg is None:
            return ""
        if not params:
            return msg

        def _param(m: re.Match) -> str:
            i = int(m.group(1)) - 1
            return str(params[i]) if 0 <= i < len(params) else m.group(0)

        return _PARAM_RE.sub(_param, msg)

    # ── mathjax-* helpers ──────────────────────────────────────────────────

    def as_list(self, code: str) -> list[str]:
        """Split ``mathjax-<code>`` on commas; ``[]`` if there is no such message."""
        key = f"{MSG_PREFIX}-{code}"
        if not self.exists(key):
            return []
        return [item for item in _LIST_SEP_RE.split(self.text(key).strip()) if item]

    def command_message(self, prefix: str, command: str) -> str:
        """``mathjax-<prefix>-<command>``: a macro body or a documentation page."""
        return self.text(f"{MSG_PREFIX}-{prefix}-{command}")


# -----------------------------------------------------------------------------
