#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for free TeX environments and the namespace guard."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from wikimath.services.context import RenderContext
from wikimath.services.environments import FreeEnvironmentDetector, environment_regex
from wikimath.services.namespaces import (
    NS_MAIN,
    NS_MEDIA,
    NS_MEDIAWIKI,
    NS_SPECIAL,
    NS_TALK,
    NS_TEMPLATE,
    Page,
    math_allowed,
)
from wikimath.services.nomath import NoMathScanner

DELIMITERS = [["\\(", "\\)"], ["$$", "$$"]]


@pytest.fixture
def detect(resolver) -> FreeEnvironmentDetector:
    return FreeEnvironmentDetector(
        ["equation", "align*"],
        NoMathScanner(["pre"]),
        ["math", "chem"],
        ("$$", "$$"),
        DELIMITERS,
        resolver,
    )


# =============================================================================
# Detection
# =============================================================================

def test_environment_is_hidden_and_flags_math(ctx, detect):
    out = detect(ctx, "Before \\begin{equation}x=y\\end{equation} after")
    assert "\\begin" not in out
    assert ctx.math_needed is True
    assert ctx.strip.unstrip(out) == "Before $$\\begin{equation}x=y\\end{equation}$$ after"


def test_output_is_not_matched_again(ctx, detect):
    once = ctx.strip.unstrip(detect(ctx, "\\begin{equation}x=y\\end{equation}"))
    again = RenderContext()
    assert detect(again, once) == once
    assert again.math_needed is False


def test_starred_environment(ctx, detect):
    out = ctx.strip.unstrip(detect(ctx, "\\begin{align*}a&=b\\end{align*}"))
    assert out == "$$\\begin{align*}a&=b\\end{align*}$$"


def test_multiline_environment(ctx, detect):
    text = "\\begin{equation}\na\n\\end{equation}"
    assert ctx.strip.unstrip(detect(ctx, text)) == f"$${text}$$"


def test_unlisted_environment_is_untouched(ctx, detect):
    text = "\\begin{matrix}a\\end{matrix}"
    assert detect(ctx, text) == text
    assert ctx.math_needed is False


def test_mismatched_end_is_untouched(ctx, detect):
    text = "\\begin{equation}x\\end{align*}"
    assert detect(ctx, text) == text


@pytest.mark.parametrize("text", [
    "<math>\\begin{equation}x\\end{equation}</math>",
    "{{#tag:math|\\begin{equation}x\\end{equation}}}",
    "<pre>\\begin{equation}x\\end{equation}</pre>",
    "$$\\begin{equation}x\\end{equation}$$",
])
def test_environment_inside_protected_region_is_untouched(ctx, detect, text):
    assert detect(ctx, text) == text
    assert ctx.math_needed is False


def test_environment_is_wikified(ctx, detect):
    out = ctx.strip.unstrip(detect(ctx, "\\begin{equation}[[Sine|s]]\\end{equation}"))
    assert "\\texttip{ \\href{ /wiki/Sine }{ s } }{ Sine }" in out


def test_no_environments_configured(ctx, resolver):
    assert environment_regex([]) is None
    detect = FreeEnvironmentDetector([], NoMathScanner([]), ["math"], ("$$", "$$"), DELIMITERS, resolver)
    assert detect.enabled is False
    text = "\\begin{equation}x\\end{equation}"
    assert detect(ctx, text) == text


# =============================================================================
# Namespace guard
# =============================================================================

@pytest.mark.parametrize("namespace", [NS_MEDIA, NS_SPECIAL, NS_MEDIAWIKI])
def test_pipeline_skips_free_environments_outside_content_namespaces(ctx, pipeline, namespace):
    text = "\\begin{equation}x\\end{equation}"
    assert pipeline.free_environments(ctx, Page("X", namespace), text) == text
    assert ctx.math_needed is False


@pytest.mark.parametrize("namespace", [NS_MAIN, NS_TALK, NS_TEMPLATE])
def test_pipeline_processes_free_environments_in_content_namespaces(ctx, pipeline, namespace):
    pipeline.free_environments(ctx, Page("X", namespace), "\\begin{equation}x\\end{equation}")
    assert ctx.math_needed is True


def test_namespace_guard_is_negative_or_interface():
    for namespace in range(-2, 16):
        assert math_allowed(namespace) == (namespace >= 0 and namespace != NS_MEDIAWIKI)


def test_namespace_guard_is_not_the_always_false_variant():
    # "namespace < 0 and namespace == NS_MEDIAWIKI" can never be true and
    # would let math through everywhere; the guard must actually block.
    blocked = [ns for ns in range(-2, 16) if not math_allowed(ns)]
    assert blocked == [NS_MEDIA, NS_SPECIAL, NS_MEDIAWIKI]


# -----------------------------------------------------------------------------
