#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for screen / unscreen and the per-render strip state."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from wikimath.services.context import MARKER_PREFIX, RenderContext
from wikimath.services.screen import placeholder, screen, unscreen


# =============================================================================
# screen / unscreen
# =============================================================================

@pytest.mark.parametrize("text, patterns", [
    ("a <b>x</b> c <b>y</b>", [r"<b>.*?</b>"]),
    ("no match here", [r"<b>.*?</b>"]),
    ("", [r"x"]),
    ("$$a$$ and \\(b\\)", [r"\$\$.+?\$\$", r"\\\(.+?\\\)"]),
])
def test_unscreen_restores_screened_text(ctx, text, patterns):
    screened_text, screened = screen(ctx, text, *patterns)
    assert unscreen(screened_text, screened) == text


def test_screen_replaces_matches_with_placeholders(ctx):
    text, screened = screen(ctx, "a <b>x</b> c", r"<b>.*?</b>")
    assert text == f"a {placeholder(0)} c"
    assert screened == {0: "<b>x</b>"}


def test_later_pattern_can_swallow_earlier_placeholders(ctx):
    original = "[x] {[y]}"
    text, screened = screen(ctx, original, r"\[.\]", r"\{.*?\}")
    assert text == f"{placeholder(0)} {placeholder(2)}"
    assert unscreen(text, screened) == original


def test_screen_accepts_span_finders(ctx):
    text, screened = screen(ctx, "abcdef", lambda t: [(1, 3)])
    assert text == f"a{placeholder(0)}def"
    assert unscreen(text, screened) == "abcdef"


def test_empty_matches_are_not_screened(ctx):
    text, screened = screen(ctx, "abc", r"x*")
    assert text == "abc"
    assert screened == {}


def test_marker_ids_do_not_collide_between_rounds(ctx):
    _, first = screen(ctx, "<b>1</b>", r"<b>.*?</b>")
    _, second = screen(ctx, "<b>2</b>", r"<b>.*?</b>")
    assert set(first).isdisjoint(second)


def test_unknown_placeholder_is_left_alone():
    assert unscreen(placeholder(99), {0: "x"}) == placeholder(99)


def test_self_referencing_placeholder_does_not_loop():
    assert unscreen(placeholder(3), {3: placeholder(3)}) == placeholder(3)


# =============================================================================
# Strip state
# =============================================================================

def test_strip_marker_round_trip(ctx):
    marker = ctx.strip.add("\\(x\\)")
    assert marker.startswith(MARKER_PREFIX)
    assert ctx.strip.unstrip(f"a {marker} b") == "a \\(x\\) b"
    assert len(ctx.strip) == 1


def test_nested_strip_markers_are_restored(ctx):
    inner = ctx.strip.add("A")
    outer = ctx.strip.add(f"<{inner}>", kind="tex-free-environment")
    assert ctx.strip.unstrip(outer) == "<A>"


def test_markers_of_another_render_are_left_alone(ctx):
    foreign = RenderContext().strip.add("x")
    assert ctx.strip.unstrip(foreign) == foreign


# =============================================================================
# Math-needed flag
# =============================================================================

def test_math_needed_is_one_way(ctx):
    assert ctx.math_needed is False
    ctx.mark_math_needed("first")
    ctx.mark_math_needed("second")
    assert ctx.math_needed is True


def test_contexts_do_not_share_state():
    a, b = RenderContext(), RenderContext()
    a.mark_math_needed("test")
    a.already_attached = True
    assert b.math_needed is False
    assert b.already_attached is False


# -----------------------------------------------------------------------------
