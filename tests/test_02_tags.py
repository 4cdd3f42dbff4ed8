#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for math tag discovery, attribute parsing and classification."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from wikimath.core.config import MATHML_NAMESPACE
from wikimath.services.tags import (
    Display,
    MathKind,
    classify,
    delimiter_regex,
    find_parser_functions,
    find_xml_tags,
    parse_attributes,
)

NAMESPACES = [MATHML_NAMESPACE]


# =============================================================================
# Attributes
# =============================================================================

def test_parse_attributes_quoted_and_bare():
    args = parse_attributes(f' xmlns="{MATHML_NAMESPACE}" display=block')
    assert args == {"xmlns": MATHML_NAMESPACE, "display": "block"}


def test_parse_attributes_single_quotes_and_case():
    assert parse_attributes(" DISPLAY='inline'") == {"display": "inline"}


def test_parse_attributes_decodes_entities():
    assert parse_attributes(' title="a &amp; b"') == {"title": "a & b"}


def test_parse_attributes_first_occurrence_wins():
    assert parse_attributes(' display="block" display="inline"') == {"display": "block"}


def test_parse_attributes_ignores_junk():
    assert parse_attributes(' display="block" !!! ') == {"display": "block"}
    assert parse_attributes(None) == {}
    assert parse_attributes("") == {}


# =============================================================================
# Classification
# =============================================================================

def test_classify_plain_tex_is_inline():
    fragment = classify("x", {}, NAMESPACES)
    assert fragment.kind is MathKind.TEX
    assert fragment.display is Display.INLINE
    assert fragment.attributes == ""


def test_classify_block_tex():
    fragment = classify("x", {"display": "block"}, NAMESPACES)
    assert fragment.is_block
    assert not fragment.is_mml
    assert fragment.attributes == ' display="block"'


def test_classify_mathml_orders_xmlns_first():
    fragment = classify("<mi>x</mi>", {"display": "block", "xmlns": MATHML_NAMESPACE}, NAMESPACES)
    assert fragment.is_mml
    assert fragment.attributes == f' xmlns="{MATHML_NAMESPACE}" display="block"'


def test_classify_foreign_namespace_is_tex():
    fragment = classify("x", {"xmlns": "http://example.org/ns"}, NAMESPACES)
    assert fragment.kind is MathKind.TEX
    assert fragment.attributes == ""


def test_classify_unknown_display_is_inline_without_attribute():
    fragment = classify("x", {"display": "sideways"}, NAMESPACES)
    assert fragment.display is Display.INLINE
    assert fragment.attributes == ""


def test_classify_explicit_inline_keeps_attribute():
    assert classify("x", {"display": "inline"}, NAMESPACES).attributes == ' display="inline"'


# =============================================================================
# XML-style tags
# =============================================================================

def test_find_xml_tags():
    text = "a <math>x</math> b <chem>H2O</chem> <MATH display='block'>y</MATH>"
    found = list(find_xml_tags(text, ["math", "chem"]))
    assert [t.name for t in found] == ["math", "chem", "math"]
    assert [t.body for t in found] == ["x", "H2O", "y"]
    assert found[2].args == {"display": "block"}
    assert text[found[0].start:found[0].end] == "<math>x</math>"


def test_find_xml_tags_self_closing():
    found = list(find_xml_tags("<math/> <math />", ["math"]))
    assert len(found) == 2
    assert all(t.body == "" for t in found)


def test_find_xml_tags_needs_a_tag_name_boundary():
    assert list(find_xml_tags("<mathematics>x</mathematics>", ["math"])) == []


def test_find_xml_tags_multiline_body():
    found = list(find_xml_tags("<math>a\n+b</math>", ["math"]))
    assert found[0].body == "a\n+b"


# =============================================================================
# {{#tag:...}} parser functions
# =============================================================================

def test_find_parser_function_with_named_argument():
    text = '{{#tag:math|\\frac{a}{b}|display="block"}} tail'
    (occ,) = find_parser_functions(text, ["math"])
    assert occ.name == "math"
    assert occ.body == "\\frac{a}{b}"
    assert occ.args == {"display": "block"}
    assert text[occ.end:] == " tail"


def test_find_parser_function_glues_bare_pipes_back():
    (occ,) = find_parser_functions("{{#tag:math|a|b}}", ["math"])
    assert occ.body == "a|b"
    assert occ.args == {}


def test_find_parser_function_nested_braces():
    (occ,) = find_parser_functions("{{#tag:chem|{}^{14}C}}", ["math", "chem"])
    assert occ.name == "chem"
    assert occ.body == "{}^{14}C"


def test_unterminated_parser_function_is_ignored():
    assert list(find_parser_functions("{{#tag:math|x", ["math"])) == []


# =============================================================================
# Delimiters
# =============================================================================

def test_delimiter_regex_finds_every_configured_pair():
    regex = delimiter_regex([["\\(", "\\)"], ["$$", "$$"]])
    assert regex.findall("a \\(x\\) b $$y$$ c") == ["\\(x\\)", "$$y$$"]


def test_delimiter_regex_without_pairs():
    assert delimiter_regex([]) is None


# -----------------------------------------------------------------------------
