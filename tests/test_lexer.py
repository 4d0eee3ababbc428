#!/usr/bin/env python3
"""
CLDTKIT LEXER SUITE
-------------------
Line roles, delimiters, comment splitting and the multi-line parameter
flag as it is threaded through classify_line().

Author: CldtKit Team
Date: 2026-10-17
"""

import pytest

from cldtkit.core.models import Delimiter, LineRole
from cldtkit.formatting.lexer import CldtLexer, classify_line, is_transformation_component


@pytest.mark.parametrize("token, expected", [
    ("w_300", True),
    ("c_fill", True),
    ("w_300,h_200", True),
    ("dpr_2.0", True),
    ("if_w_gt_500", True),
    ("variable_x", True),
    ("sample", False),
    ("folder_name", False),
    ("w300", False),
    # Known false positive of the prefix heuristic
    ("e_mail_banner", True),
])
def test_component_classifier(token, expected):
    assert is_transformation_component(token) is expected


@pytest.mark.parametrize("text, role", [
    ("", LineRole.BLANK),
    ("    ", LineRole.BLANK),
    ("  # a note", LineRole.COMMENT_ONLY),
    ("https://res.cloudinary.com/demo/image/upload/", LineRole.URL),
    ("v1234567890/", LineRole.VERSION),
    ("v12", LineRole.VERSION),
    ("w_300/", LineRole.TRANSFORMATION),
    ("if_end", LineRole.TRANSFORMATION),
    ("$width_300", LineRole.TRANSFORMATION),
    ("sample.jpg", LineRole.PUBLIC_ID),
    ("l_text:Arial_20:Hello", LineRole.MULTI_LINE_PARAM_START),
    ("l_text:Arial_20:Hello/", LineRole.TRANSFORMATION),
])
def test_roles_outside_span(text, role):
    line, in_span = classify_line(text, False)
    assert line.role is role
    assert in_span is (role is LineRole.MULTI_LINE_PARAM_START)


def test_delimiter_and_comment_split():
    """The comment travels with the line but never decides the delimiter."""
    line, _ = classify_line("   w_100,   # keep it small/", False)

    assert line.role is LineRole.TRANSFORMATION
    assert line.trailing_delimiter is Delimiter.COMMA
    assert line.comment_suffix == "# keep it small/"
    assert line.code == "w_100,"
    assert line.keyword == "w_100"


def test_span_lifecycle():
    """
    SPAN TEST: the start line opens the span, continuation lines stay in it,
    and the first continuation ending in ',' or '/' closes it.
    """
    text = "l_subtitles:arial_20:sample.srt\nline two\n\n# inside\nlast line,\nw_100"
    roles = [line.role for line in CldtLexer().tokenize(text)]

    assert roles == [
        LineRole.MULTI_LINE_PARAM_START,
        LineRole.MULTI_LINE_PARAM_CONTINUATION,
        LineRole.BLANK,
        LineRole.COMMENT_ONLY,
        LineRole.MULTI_LINE_PARAM_CONTINUATION,
        LineRole.TRANSFORMATION,
    ]


def test_flag_is_threaded_not_stored():
    """Two passes over the same lexer never leak span state."""
    lexer = CldtLexer()
    lexer.tokenize("l_text:Arial_20:never closed")

    lines = lexer.tokenize("w_100")
    assert lines[0].role is LineRole.TRANSFORMATION

    line, in_span = classify_line("still inside", True)
    assert line.role is LineRole.MULTI_LINE_PARAM_CONTINUATION
    assert in_span is True


def test_artifacts_are_cleaned():
    lines = CldtLexer().tokenize("\ufeffw_100\r\nh_100\rc_fill")

    assert [line.trimmed_text for line in lines] == ["w_100", "h_100", "c_fill"]
    assert [line.line_no for line in lines] == [0, 1, 2]
