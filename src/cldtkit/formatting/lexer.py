#!/usr/bin/env python3
"""
CLDTKIT LEXER - Line & Component Classifier
-------------------------------------------
Decomposes raw CLDT text into classified Line models.

The only running state is the multi-line parameter flag. It is passed in
and handed back by classify_line() instead of living on an object, so the
formatter and the linter can share one classifier without resetting it.

Author: CldtKit Team
Date: 2026-10-17
"""

import re
from typing import List, Optional, Tuple

from cldtkit.core.models import Delimiter, Line, LineRole

# Short-code prefixes that mark a token as a pipeline parameter.
# Extend this table to teach the classifier new parameter families.
TRANSFORMATION_PREFIXES = {
    "w_": "width",
    "h_": "height",
    "c_": "crop",
    "g_": "gravity",
    "q_": "quality",
    "f_": "format",
    "a_": "angle",
    "bo_": "border",
    "r_": "radius",
    "e_": "effect",
    "o_": "opacity",
    "l_": "layer",
    "u_": "underlay",
    "fl_": "flag",
    "co_": "color",
    "b_": "background",
    "z_": "zoom",
    "ar_": "aspect ratio",
    "x_": "x coordinate",
    "y_": "y coordinate",
    "dpr_": "device pixel ratio",
    "if_": "conditional",
    "else": "conditional else",
    "end_": "conditional end",
    "variable_": "variable assignment",
}

# Parameters whose value may be authored across several physical lines.
MULTI_LINE_PARAM_KEYS = ("l_text:", "l_subtitles:")

CONDITIONAL_PREFIX = "if_"
VARIABLE_SIGIL = "$"
COMMENT_MARKER = "#"

VERSION_PATTERN = re.compile(r'^v\d+$')
URL_PATTERN = re.compile(r'^https?://')


def is_transformation_component(component: str) -> bool:
    """
    Heuristic membership test for a single slash-delimited token.

    A comma means a multi-parameter component. Otherwise the token needs an
    underscore and a known short-code prefix. Public-ids that happen to
    look like "e_mail_banner" are a known false positive.
    """
    if "," in component:
        return True
    return "_" in component and component.startswith(tuple(TRANSFORMATION_PREFIXES))


def _ends_with_delimiter(text: str) -> bool:
    return text.endswith(",") or text.endswith("/")


def _split_comment(trimmed: str) -> Tuple[str, Optional[str]]:
    """Splits 'w_300/  # note' into ('w_300/', '# note')."""
    idx = trimmed.find(COMMENT_MARKER)
    if idx <= 0:
        return trimmed, None
    return trimmed[:idx].strip(), trimmed[idx:]


def _delimiter_of(code: str) -> Delimiter:
    if code.endswith("/"):
        return Delimiter.SLASH
    if code.endswith(","):
        return Delimiter.COMMA
    return Delimiter.NONE


def starts_multi_line_param(code: str) -> bool:
    return code.startswith(MULTI_LINE_PARAM_KEYS) and not _ends_with_delimiter(code)


def classify_line(raw: str, in_span: bool, line_no: int = 0) -> Tuple[Line, bool]:
    """
    Classifies one physical line.

    Args:
        raw: The line as it appears in the document.
        in_span: True while a multi-line parameter is open.
        line_no: 0-based position, carried onto the Line.

    Returns:
        The classified Line and the updated in_span flag.
    """
    trimmed = raw.strip()

    if not trimmed:
        return Line(raw, trimmed, LineRole.BLANK, line_no=line_no), in_span
    if trimmed.startswith(COMMENT_MARKER):
        return Line(raw, trimmed, LineRole.COMMENT_ONLY, line_no=line_no), in_span

    code, comment = _split_comment(trimmed)
    delimiter = _delimiter_of(code)

    def build(role: LineRole) -> Line:
        return Line(raw, trimmed, role, delimiter, comment, line_no)

    # 1. Open span: everything is continuation; the closing punctuation
    #    ends the span but stays part of the parameter value.
    if in_span:
        return build(LineRole.MULTI_LINE_PARAM_CONTINUATION), not _ends_with_delimiter(code)

    if starts_multi_line_param(code):
        return build(LineRole.MULTI_LINE_PARAM_START), True

    # 2. Structural roles outside a span
    if URL_PATTERN.match(code):
        return build(LineRole.URL), False

    keyword = code.rstrip(",/")
    if VERSION_PATTERN.match(keyword):
        return build(LineRole.VERSION), False

    if (is_transformation_component(keyword)
            or keyword.startswith(CONDITIONAL_PREFIX)
            or keyword.startswith(VARIABLE_SIGIL)):
        return build(LineRole.TRANSFORMATION), False

    # Unrecognised lines pass through as opaque public-id text
    return build(LineRole.PUBLIC_ID), False


class CldtLexer:
    """
    Orchestrates the transition from raw text to classified Lines.
    Holds no state between calls; the span flag lives inside tokenize().
    """

    def _clean_artifacts(self, text: str) -> str:
        """
        Removes invisible UTF-8 BOM markers and standardizes line endings.
        """
        text = text.lstrip('\ufeff')
        return text.replace('\r\n', '\n').replace('\r', '\n')

    def split_lines(self, text: str) -> List[str]:
        return self._clean_artifacts(text).split("\n")

    def tokenize(self, text: str) -> List[Line]:
        """
        Decomposes a raw document into its ordered Line list.
        This is the primary interface for the formatter and the linter.
        """
        in_span = False
        lines = []
        for i, raw in enumerate(self.split_lines(text)):
            line, in_span = classify_line(raw, in_span, i)
            lines.append(line)
        return lines
