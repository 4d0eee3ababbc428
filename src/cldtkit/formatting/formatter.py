#!/usr/bin/env python3
"""
CLDTKIT FORMATTER - Canonical Renderer
--------------------------------------
Turns a CLDT document into its canonical text form.

Two input shapes are accepted:
  (a) a single-line delivery URL, exploded into one component per line;
  (b) an already multi-line document, re-indented from block depth.

Shape (a) is always rendered through (b), so there is only one canonical
layout and format(format(text)) == format(text).

Author: CldtKit Team
Date: 2026-10-17
"""

import logging
from typing import List, Optional

from cldtkit.core.models import DecomposedUrl, Delimiter, FormattingPreference, Line, LineRole
from cldtkit.formatting.blocks import BlockTracker, closes_block, is_else
from cldtkit.formatting.lexer import CldtLexer, URL_PATTERN
from cldtkit.formatting.url import UrlDecomposer

logger = logging.getLogger("cldtkit.formatter")

PIPELINE_SEPARATOR = Delimiter.SLASH.value


class CldtFormatter:
    """
    Re-renders CLDT text. Holds only the immutable preference; every call
    builds its own lexer state and block tracker.
    """

    def __init__(self, preference: Optional[FormattingPreference] = None):
        self.preference = preference or FormattingPreference()
        self.lexer = CldtLexer()
        self.decomposer = UrlDecomposer()

    def format(self, text: str) -> str:
        """Phase entry point: URL explosion (if needed), then re-indentation."""
        trimmed = text.strip()
        if URL_PATTERN.match(trimmed) and "\n" not in trimmed:
            decomposed = self.decomposer.decompose(trimmed)
            if decomposed is None:
                return text
            logger.debug(f"Exploding URL: {len(decomposed.transformations)} segments, "
                         f"version={decomposed.version}")
            text = "\n".join(self.explode_url(decomposed))
        return self.format_document(text)

    def explode_url(self, url: DecomposedUrl) -> List[str]:
        """
        One line per transformation component. Comma groups are split so
        that every sub-component but the last ends with a comma.
        """
        lines = [url.prefix]
        for segment in url.transformations:
            parts = segment.split(",")
            for i, part in enumerate(parts):
                lines.append(part + ("," if i < len(parts) - 1 else PIPELINE_SEPARATOR))
        if url.version:
            lines.append(url.version + PIPELINE_SEPARATOR)
        if url.public_id:
            lines.append("/".join(url.public_id))
        return lines

    def format_document(self, text: str) -> str:
        lines = self.lexer.tokenize(text)
        tracker = BlockTracker()
        unit = self.preference.indent_unit

        content = [line for line in lines if line.is_content]
        last_content = content[-1].line_no if content else -1
        public_id_line = self._public_id_line(content)

        output: List[str] = []
        for line in lines:
            if line.line_no == public_id_line:
                tracker.start_tail()
            in_tail = tracker.in_tail
            depth = tracker.advance(line)

            # 1. Blank lines collapse to a single one
            if line.role is LineRole.BLANK:
                if not output or output[-1] != "":
                    output.append("")
                continue

            # 2. Comment-only lines are kept flush-left
            if line.role is LineRole.COMMENT_ONLY:
                output.append(line.trimmed_text)
                continue

            rendered = unit * depth + self._render_code(line, in_tail)
            if line.comment_suffix:
                padding = max(1, self.preference.comment_column - len(rendered))
                rendered += " " * padding + line.comment_suffix
            output.append(rendered)

            # 3. Breathing room after a block closes
            if self._ends_block(line, in_tail) and line.line_no < last_content:
                output.append("")

        return "\n".join(output)

    def _public_id_line(self, content: List[Line]) -> int:
        """
        In a URL-rooted document the last undelimited content line is the
        public-id, even without a version segment in front of it.
        """
        if len(content) < 2 or content[0].role is not LineRole.URL:
            return -1
        last = content[-1]
        if last.trailing_delimiter is not Delimiter.NONE:
            return -1
        if last.role is LineRole.MULTI_LINE_PARAM_CONTINUATION:
            return -1
        return last.line_no

    def _render_code(self, line: Line, in_tail: bool) -> str:
        if line.role is LineRole.URL:
            return line.code
        return line.keyword + self._delimiter_for(line, in_tail)

    def _delimiter_for(self, line: Line, in_tail: bool) -> str:
        """
        The line's own trailing comma/slash wins. Otherwise only
        transformation lines get the pipeline separator.
        """
        if line.trailing_delimiter is not Delimiter.NONE:
            return line.trailing_delimiter.value
        if line.role is LineRole.TRANSFORMATION and not in_tail:
            return PIPELINE_SEPARATOR
        return ""

    def _ends_block(self, line: Line, in_tail: bool) -> bool:
        if in_tail or line.role is LineRole.MULTI_LINE_PARAM_CONTINUATION:
            return False
        keyword = line.keyword
        return closes_block(keyword) and not is_else(keyword)
