#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for request validation and response serialisation.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from wikimath.services.namespaces import NS_MAIN


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderRequest(BaseModel):
    text: str = Field(default="", max_length=1_000_000)
    title: str = Field(default="Main Page", max_length=255)
    namespace: int = NS_MAIN
    lang: str | None = Field(default=None, max_length=35)

    @field_validator("lang")
    @classmethod
    def lang_code(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        v = v.strip().lower()
        if not v.replace("-", "").isalnum():
            raise ValueError("lang must be a language code such as 'en' or 'pt-br'")
        return v


# -----------------------------------------------------------------------------

class RenderResponse(BaseModel):
    html: str
    math_needed: bool = False
    inline_scripts: list[str] = []
    script_files: list[str] = []
    inline_styles: list[str] = []
    csp: dict[str, list[str]] = {}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# System
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class VersionResponse(BaseModel):
    software: str = "MathJax"
    url: str = "https://www.mathjax.org/"
    version: str
    engine: str


# -----------------------------------------------------------------------------
