#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables or a .env file.
Nested values (``mathjax``, the lists) are given as JSON in the environment.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wikimath._version import __version__ as _pkg_version


# -----------------------------------------------------------------------------

MATHML_NAMESPACE = "http://www.w3.org/1998/Math/MathML"

DEFAULT_SKIP_HTML_TAGS = [
    "script", "noscript", "style", "textarea", "pre", "code",
    "annotation", "annotation-xml",
    "nowiki", "syntaxhighlight", "source",
]

DEFAULT_MML_TAGS = [
    "math", "semantics", "annotation", "annotation-xml",
    "maction", "maligngroup", "malignmark", "menclose", "merror", "mfenced",
    "mfrac", "mglyph", "mi", "mlabeledtr", "mlongdiv", "mmultiscripts", "mn",
    "mo", "mover", "mpadded", "mphantom", "mprescripts", "mroot", "mrow", "ms",
    "mscarries", "mscarry", "msgroup", "msline", "mspace", "msqrt", "msrow",
    "mstack", "mstyle", "msub", "msubsup", "msup", "mtable", "mtd", "mtext",
    "mtr", "munder", "munderover", "none",
]


def _default_mathjax() -> dict[str, Any]:
    """MathJax 3 configuration shipped to the browser or the render engine."""
    return {
        "tex": {
            "inlineMath": [["\\(", "\\)"]],
            "displayMath": [["$$", "$$"]],
            "tags": "ams",
            "macros": {},
            "packages": {"[+]": ["color", "amscd", "action", "cancel", "mhchem"]},
        },
        "options": {
            "skipHtmlTags": list(DEFAULT_SKIP_HTML_TAGS),
            "ignoreHtmlClass": "tex2jax_ignore",
            "processHtmlClass": "tex2jax_process",
            "menuOptions": {"settings": {"zoom": "Double-Click"}},
        },
        "loader": {
            "load": ["[tex]/color", "[tex]/amscd", "[tex]/action", "[tex]/cancel", "[tex]/mhchem"],
        },
    }


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "WikiMath"
    app_version: str = _pkg_version
    base_url: str = "http://localhost:8000"
    article_path: str = "/wiki/$1"
    debug: bool = False
    environment: Literal["development", "testing", "production"] = "development"
    log_level: str = "INFO"
    content_language: str = "en"
    cors_origins: list[str] = ["*"]

    # ── Tags ───────────────────────────────────────────────────────────────

    math_tag: str = "math"
    chem_tag: str = "chem"
    mml_tag: str = "math"
    mml_namespaces: list[str] = [MATHML_NAMESPACE]
    mml_tags_allowed: list[str] = Field(default_factory=lambda: list(DEFAULT_MML_TAGS))

    # ── MathJax ────────────────────────────────────────────────────────────

    mathjax: dict[str, Any] = Field(default_factory=_default_mathjax)
    add_wikilinks: bool = True

    # ── Engine selection ───────────────────────────────────────────────────

    client_side: bool = True
    server_side: bool = False
    service_url: str = ""
    service_external_url: str = ""
    service_version_url: str = ""

    # ── Client script distribution ─────────────────────────────────────────

    use_cdn: bool = True
    cdn_distribution: str = "https://cdn.jsdelivr.net/npm/mathjax@3/es5"
    extension_assets_path: str = "/extensions"
    local_distribution: str = "/MathJax/node_modules/mathjax/es5"

    # ── Local node.js engine ───────────────────────────────────────────────

    node_path: str = "node"
    tex2mml_script: Path = Path("./tex2mml.js")
    node_modules: Path = Path("./node_modules")
    engine_timeout: float = 30.0

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    @property
    def inline_delimiters(self) -> list[list[str]]:
        return self.mathjax["tex"]["inlineMath"]

    @property
    def display_delimiters(self) -> list[list[str]]:
        return self.mathjax["tex"]["displayMath"]

    @property
    def skip_html_tags(self) -> list[str]:
        return self.mathjax.get("options", {}).get("skipHtmlTags", [])


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
