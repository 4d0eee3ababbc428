#!/usr/bin/env python3
"""
CLDTKIT DIAGNOSTICS SUITE
-------------------------
Every lint rule, the numeric boundary table and the multi-line span skip.

Author: CldtKit Team
Date: 2026-10-17
"""

import pytest

from cldtkit.core.models import Severity
from cldtkit.rules.diagnostics import DiagnosticsLinter


def lint(text):
    return DiagnosticsLinter().lint(text)


def codes(text):
    return [d.code for d in lint(text)]


@pytest.mark.parametrize("text, expected", [
    ("quality: 1", []),
    ("quality: 100", []),
    ("quality: 0", ["invalid-quality"]),
    ("quality: 101", ["invalid-quality"]),
    ("opacity: 0", []),
    ("opacity: 100", []),
    ("opacity: -1", ["invalid-opacity"]),
    ("opacity: 101", ["invalid-opacity"]),
    ("angle: -360", []),
    ("angle: 360", []),
    ("angle: -361", ["angle-out-of-range"]),
    ("angle: 361", ["angle-out-of-range"]),
    ("QUALITY : 500", ["invalid-quality"]),
    ("quality: abc", []),
])
def test_numeric_boundaries(text, expected):
    assert codes(text) == expected


def test_numeric_severity_and_range():
    quality, = lint("  quality: 0")
    angle, = lint("angle: 400")

    assert quality.severity is Severity.WARNING
    assert (quality.range.line, quality.range.start_column, quality.range.end_column) == (0, 11, 12)
    assert quality.message == "Quality value should be between 1 and 100 (got 0)"
    assert angle.severity is Severity.INFO


def test_deprecated_property():
    """SCENARIO: fetch_format anywhere on a line yields exactly one hint."""
    found = lint("w_100/\nf_auto,fetch_format/ # FETCH_FORMAT again")

    assert len(found) == 1
    hint = found[0]
    assert hint.code == "deprecated-property"
    assert hint.severity is Severity.HINT
    assert hint.range.line == 1
    assert hint.range.start_column == 7
    assert "format" in hint.message


def test_missing_colon():
    found = lint("w_100/\n  quality 80")

    assert len(found) == 1
    assert found[0].code == "missing-colon"
    assert found[0].severity is Severity.ERROR
    assert (found[0].range.line, found[0].range.start_column, found[0].range.end_column) == (1, 2, 9)
    assert found[0].message == "Property 'quality' should be followed by a colon"


@pytest.mark.parametrize("text", [
    "https://res.cloudinary.com/demo/image/upload/w_100/sample.jpg",
    "w_800,c_fill/",
    "$width_300",
    "$(width)",
    "if_w_gt_500",
    "my image.jpg",
    "some words/",
    "some words,",
    "some words # with a comment",
])
def test_cldt_syntax_is_not_flagged(text):
    assert codes(text) == []


def test_unmatched_braces():
    found = lint("{width: 100")

    assert [d.code for d in found] == ["unmatched-braces"]
    assert found[0].severity is Severity.WARNING
    assert found[0].range.end_column == len("{width: 100")


def test_comments_and_blanks_are_skipped():
    assert lint("# quality: 0\n// quality 80\n/* opacity: 500 */\n\n   ") == []


def test_multi_line_parameter_is_never_flagged():
    text = "l_text:Arial_20:quality 80\nquality 80 {\nopacity: 500/\nfl_layer_apply"
    assert lint(text) == []


def test_unmatched_block_end():
    found = lint("w_100\n  if_end")

    assert [d.code for d in found] == ["unmatched-block-end"]
    assert found[0].severity is Severity.WARNING
    assert (found[0].range.line, found[0].range.start_column, found[0].range.end_column) == (1, 2, 8)


def test_balanced_blocks_are_clean():
    assert lint("if_w_gt_5\ne_sharpen\nif_else\ne_blur\nif_end\nl_logo\nfl_layer_apply") == []


def test_layer_opened_inside_comma_group_is_balanced():
    assert lint("w_50,l_logo/\nfl_layer_apply/\nsample.jpg") == []
    assert lint("co_red,u_paper/\ne_blur\nfl_layer_apply") == []


def test_span_closing_its_layer_leaves_nothing_open():
    """Only the second fl_layer_apply is extra; the span already applied the layer."""
    found = lint("l_text:Arial_20:Hi\nthere,fl_layer_apply/\nfl_layer_apply")

    assert [(d.range.line, d.code) for d in found] == [(2, "unmatched-block-end")]


def test_results_are_ordered_by_line():
    found = lint("if_end\nquality: 0\nwidth 100\nfetch_format: auto")

    assert [(d.range.line, d.code) for d in found] == [
        (0, "unmatched-block-end"),
        (1, "invalid-quality"),
        (2, "missing-colon"),
        (3, "deprecated-property"),
    ]


def test_diagnostic_serialises():
    data = lint("quality: 0")[0].to_dict()

    assert data == {
        "range": {"line": 0, "start_column": 9, "end_column": 10},
        "message": "Quality value should be between 1 and 100 (got 0)",
        "severity": "warning",
        "code": "invalid-quality",
    }
