#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for wikilinks inside TeX and MathML, and for strip_tags()."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from wikimath.core.config import DEFAULT_MML_TAGS
from wikimath.services.wikify import strip_tags, tex_hyperlink, wikify_mml, wikify_tex


# =============================================================================
# strip_tags
# =============================================================================

def test_strip_tags_removes_markup():
    assert strip_tags("a <b>bold</b> c") == "a bold c"


def test_strip_tags_keeps_comparisons():
    assert strip_tags("a < b > c") == "a < b > c"


def test_strip_tags_removes_comments_and_declarations():
    assert strip_tags("x<!-- note -->y<!DOCTYPE html>z") == "xyz"


def test_strip_tags_keeps_allowed_tags():
    assert strip_tags("<mi>x</mi><span>y</span>", ["mi"]) == "<mi>x</mi>y"


def test_strip_tags_escapes_unterminated_tag():
    assert strip_tags("x<img src=x onerror=alert(1) ") == "x&lt;img src=x onerror=alert(1) "


def test_strip_tags_escapes_unterminated_allowed_tag():
    assert strip_tags("<mi>x</mi><mi", ["mi"]) == "<mi>x</mi>&lt;mi"


# =============================================================================
# TeX
# =============================================================================

def test_tex_wikilink_with_alias(ctx, resolver):
    assert wikify_tex(ctx, "[[Sine|\\sin]] x", resolver) == (
        "\\texttip{ \\href{ /wiki/Sine }{ \\sin } }{ Sine } x"
    )


def test_tex_wikilink_alias_defaults_to_page(ctx, resolver):
    assert wikify_tex(ctx, "[[Real number]]", resolver) == (
        "\\texttip{ \\href{ /wiki/Real_number }{ Real number } }{ Real number }"
    )


def test_tex_href_to_page(ctx, resolver):
    assert wikify_tex(ctx, "\\href{Fraction}{x}", resolver) == (
        "\\texttip{ \\href{ /wiki/Fraction }{ x } }{ Fraction }"
    )


def test_tex_href_to_url_is_untouched(ctx, resolver):
    tex = "\\href{https://example.org/}{x} \\href{ /wiki/Sine }{ y }"
    assert wikify_tex(ctx, tex, resolver) == tex


def test_tex_unresolvable_page_degrades_to_alias(ctx, resolver):
    assert wikify_tex(ctx, "[[{bad}|Alias]]", resolver) == "Alias"


def test_tex_html_is_stripped(ctx, resolver):
    assert wikify_tex(ctx, "x<span>+</span>y", resolver) == "x+y"


def test_tex_commutative_diagram_arrows_survive(ctx, resolver):
    tex = "A @<<< B @>>> C"
    assert wikify_tex(ctx, tex, resolver) == tex


def test_tex_unterminated_tag_is_escaped(ctx, resolver):
    assert wikify_tex(ctx, "x<img src=x onerror=alert(1) ", resolver) == (
        "x&lt;img src=x onerror=alert(1) "
    )


def test_tex_arrow_lookalike_cannot_smuggle_a_tag(ctx, resolver):
    tex = "<img src=x onerror=alert(1) <a<>"
    assert wikify_tex(ctx, tex, resolver) == "&lt;img src=x onerror=alert(1) &lt;a<>"


def test_tex_lettered_arrow_is_escaped(ctx, resolver):
    assert wikify_tex(ctx, "A @<f<< B", resolver) == "A @&lt;f<< B"


def test_tex_wikification_is_idempotent(ctx, resolver):
    once = wikify_tex(ctx, "[[Sine|\\sin]]", resolver)
    assert wikify_tex(ctx, once, resolver) == once


def test_tex_hyperlink_helper(resolver):
    assert tex_hyperlink(resolver, "sine#Definition", "s") == (
        "\\texttip{ \\href{ /wiki/Sine#Definition }{ s } }{ sine#Definition }"
    )


# =============================================================================
# MathML
# =============================================================================

def test_mml_tooltip_becomes_texttip(resolver):
    mml = '<maction actiontype="tooltip" href="Sine"><mi>sin</mi></maction>'
    out = wikify_mml(mml, resolver, DEFAULT_MML_TAGS)
    assert 'actiontype="texttip"' in out
    assert 'href="https://wiki.example.org/wiki/Sine"' in out
    assert "<mtext><mi>sin</mi></mtext>" in out


def test_mml_wikilink(resolver):
    out = wikify_mml("<mrow>[[Sine|sin]]</mrow>", resolver, DEFAULT_MML_TAGS)
    assert out.startswith('<mrow><maction actiontype="texttip" href="https://wiki.example.org/wiki/Sine">')
    assert "<mtext>sin</mtext>" in out


def test_mml_absolute_href_is_untouched(resolver):
    mml = '<maction actiontype="tooltip" href="https://example.org/"><mi>x</mi></maction>'
    assert wikify_mml(mml, resolver, DEFAULT_MML_TAGS) == mml


def test_mml_unresolvable_page_is_left_alone(resolver):
    mml = "<mi>[[{bad}|x]]</mi>"
    assert wikify_mml(mml, resolver, DEFAULT_MML_TAGS) == mml


def test_mml_disallowed_tags_are_stripped(resolver):
    mml = "<mi>x</mi><script>alert(1)</script><mo>+</mo>"
    assert wikify_mml(mml, resolver, DEFAULT_MML_TAGS) == "<mi>x</mi>alert(1)<mo>+</mo>"


def test_mml_unterminated_tag_is_escaped(resolver):
    mml = "<mi>x</mi><img src=x onerror=alert(1) "
    assert wikify_mml(mml, resolver, DEFAULT_MML_TAGS) == "<mi>x</mi>&lt;img src=x onerror=alert(1) "


# -----------------------------------------------------------------------------
