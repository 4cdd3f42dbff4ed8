#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Page output
===========
What a render hands back to the page: the body HTML plus the assets the
skin has to emit (inline scripts, script files, inline styles) and the
extra Content-Security-Policy sources those assets need.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field


# -----------------------------------------------------------------------------

@dataclass
class PageOutput:
    body: str = ""
    math_needed: bool = False
    inline_scripts: list[str] = field(default_factory=list)
    script_files: list[str] = field(default_factory=list)
    inline_styles: list[str] = field(default_factory=list)
    csp: dict[str, list[str]] = field(default_factory=dict)

    def add_inline_script(self, script: str) -> None:
        self.inline_scripts.append(script)

    def add_script_file(self, url: str) -> None:
        if url not in self.script_files:
            self.script_files.append(url)

    def add_inline_style(self, style: str) -> None:
        if style not in self.inline_styles:
            self.inline_styles.append(style)

    def add_csp_source(self, directive: str, source: str) -> None:
        sources = self.csp.setdefault(directive, [])
        if source not in sources:
            sources.append(source)


# -----------------------------------------------------------------------------
