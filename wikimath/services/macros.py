#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
TeX macros and command definitions
==================================
Two ways of teaching the renderer about wiki-specific commands:

  - plain macros (``mathjax-macro-<cmd>``) go straight into the renderer
    configuration as ``tex.macros`` when commands are not linked
  - with wikilinks on, a hidden block of ``\\newcommand`` /
    ``\\renewcommand`` definitions is prepended to the page, wrapping each
    used command in ``\\href`` to its documentation page
    (``mathjax-page-<cmd>``)

Only commands that actually occur in the page are defined.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import copy
import json
import logging
import re
from typing import Iterable

from wikimath.core.config import Settings
from wikimath.services.messages import MessageCatalog
from wikimath.services.titles import TitleResolverProtocol

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

# A command name after a backslash: one punctuation character or a word.
TEXCOMMAND_RE = re.compile(r"""(?<=\\)([`'^"~=.#$%&,:;>\\_{|}]|[A-Za-z0-9]+)""")

_PLACEHOLDER_ARG_RE = re.compile(r"#(\d)")

MAX_PARAMS = 9

DEFINITIONS = (
    # define; page
    r"\newcommand{ \%(command)s }[%(arity)d]{ \href{ %(url)s }{ %(definition)s } }",
    # define; no page
    r"\newcommand{ \%(command)s }[%(arity)d]{ %(definition)s }",
    # redefine; page
    r"\let\old%(command)s\%(command)s \renewcommand{ \%(command)s }[%(arity)d]"
    r"{ \href{ %(url)s }{ \old%(command)s%(args)s } }",
    # redefine; no page
    r"\let\old%(command)s\%(command)s \renewcommand{ \%(command)s }[%(arity)d]"
    r"{ \old%(command)s%(args)s }",
)

DEFINITIONS_OPEN = '<div id="definitions" style="display: none">'
DEFINITIONS_CLOSE = "</div>"
DEFINITIONS_MARK = '<div id="definitions"'


# -----------------------------------------------------------------------------

def used_commands(html: str) -> list[str]:
    """TeX command names occurring in *html*, unique, in order of appearance."""
    return list(dict.fromkeys(m.group(1) for m in TEXCOMMAND_RE.finditer(html)))


def param_counts(messages: MessageCatalog) -> dict[str, int]:
    """``{command: arity}`` from ``mathjax-params-1`` ... ``mathjax-params-9``."""
    counts: dict[str, int] = {}
    for arity in range(1, MAX_PARAMS + 1):
        for command in messages.as_list(f"params-{arity}"):
            counts[command] = arity
    return counts


def definition(
    command: str,
    body: str,
    arity: int,
    page: str,
    resolver: TitleResolverProtocol,
) -> str:
    """One ``\\newcommand`` (when *body* is given) or ``\\renewcommand``.

    With no configured arity, it is inferred from the distinct ``#n``
    placeholders in *body*.  A *page* that is not a valid title is treated as
    no page at all.  Non-ASCII command names yield ``""``.
    """
    if not command.isascii():
        return ""
    if arity == 0 and body:
        arity = len(set(_PLACEHOLDER_ARG_RE.findall(body)))
    title = resolver.resolve(page) if page else None
    fmt = (0 if body else 2) + (0 if title is not None else 1)
    return DEFINITIONS[fmt] % {
        "command": command,
        "arity": arity,
        "url": title.local_url if title is not None else "",
        "args": "".join(f"{{ #{i} }}" for i in range(1, arity + 1)),
        "definition": body,
    }


def definitions(
    used: Iterable[str],
    open_: str,
    close: str,
    messages: MessageCatalog,
    resolver: TitleResolverProtocol,
) -> str:
    """The hidden definitions block for the *used* commands.

    ``""`` when none of them is a known macro or linked command.
    """
    known = set(messages.as_list("macros")) | set(messages.as_list("pages"))
    commands = [command for command in used if command in known]
    if not commands:
        return ""
    params = param_counts(messages)
    lines = [
        definition(
            command,
            messages.command_message("macro", command),
            params.get(command, 0),
            messages.command_message("page", command),
            resolver,
        )
        for command in commands
    ]
    logger.debug("Defining %d TeX command(s): %s", len(commands), ", ".join(commands))
    return DEFINITIONS_OPEN + open_ + "\n".join(line for line in lines if line) + close + DEFINITIONS_CLOSE


# -----------------------------------------------------------------------------
# Renderer configuration
# -----------------------------------------------------------------------------

def tex_macros(messages: MessageCatalog, add_wikilinks: bool) -> dict[str, str]:
    """``tex.macros`` for the renderer; empty when commands are linked."""
    if add_wikilinks:
        return {}
    macros: dict[str, str] = {}
    for code in messages.as_list("macros"):
        macro = messages.command_message("macro", code)
        if macro:
            macros[code] = macro
    return macros


def mathjax_config_json(settings: Settings, messages: MessageCatalog) -> str:
    """Complete renderer configuration as JSON; ``"{}"`` if it cannot be built."""
    try:
        config = copy.deepcopy(settings.mathjax)
        config.setdefault("tex", {})["macros"] = tex_macros(messages, settings.add_wikilinks)
        return json.dumps(config, indent=4, ensure_ascii=False)
    except (TypeError, ValueError, AttributeError) as exc:
        logger.error("Cannot encode MathJax configuration: %s", exc, exc_info=True)
        return "{}"


def has_definitions(html: str) -> bool:
    """True if *html* already starts a definitions block."""
    return DEFINITIONS_MARK in html


# -----------------------------------------------------------------------------
