#!/usr/bin/env python3
"""
CLDTKIT BLOCK TRACKER - Nesting State Machine
---------------------------------------------
Consumes classified Lines in order and answers one question per line:
at which depth should it be rendered?

Conditional blocks open on if_<cond>, switch branch on if_else and close
on if_end / end_if. Layer blocks open on any comma component starting
with l_ / u_ and close on any line carrying fl_layer_apply. Depth
never drops below zero; an excess close is absorbed and remembered in
excess_closes for the linter.

A version line (v<digits>) ends the pipeline: open blocks are dropped and
everything after it is public-id tail rendered flush-left. The formatter
can also start the tail itself (start_tail) for a versionless URL.

Continuation lines of a multi-line parameter render one level under their
start line, but their own opens and closes still move the stack.

Author: CldtKit Team
Date: 2026-10-17
"""

from dataclasses import dataclass, field
from typing import List

from cldtkit.core.models import Block, BlockKind, Line, LineRole

CONDITIONAL_OPEN = "if_"
CONDITIONAL_ELSE = "if_else"
CONDITIONAL_END = ("if_end", "end_if")
LAYER_OPEN = ("l_", "u_")
LAYER_APPLY = "fl_layer_apply"


def is_else(keyword: str) -> bool:
    return keyword == CONDITIONAL_ELSE


def opens_block(keyword: str) -> bool:
    """True when the keyword starts a conditional branch or a layer."""
    if is_else(keyword):
        return True
    if (keyword.startswith(CONDITIONAL_OPEN)
            and not keyword.startswith("if_end")
            and "end_if" not in keyword):
        return True
    return any(part.startswith(LAYER_OPEN) for part in keyword.split(","))


def closes_block(keyword: str) -> bool:
    """True when the keyword ends a conditional branch or applies a layer."""
    return is_else(keyword) or keyword in CONDITIONAL_END or LAYER_APPLY in keyword


def block_kind(keyword: str) -> BlockKind:
    if keyword.startswith(CONDITIONAL_OPEN):
        return BlockKind.CONDITIONAL
    return BlockKind.LAYER


@dataclass
class BlockTracker:
    """
    Explicit state + transition function for block nesting.

    A fresh tracker is created for every pass; nothing is shared between
    the formatter and the linter.
    """
    stack: List[Block] = field(default_factory=list)
    span_depth: int = 0
    in_tail: bool = False
    excess_closes: List[int] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self.stack)

    def _pop(self, line_no: int):
        if not self.stack:
            # Clamp at zero; the linter reports it, the formatter does not care
            self.excess_closes.append(line_no)
            return
        self.stack.pop().is_open = False

    def start_tail(self):
        """Drops open blocks; every later line is public-id text."""
        for block in self.stack:
            block.is_open = False
        self.stack.clear()
        self.in_tail = True

    def advance(self, line: Line) -> int:
        """
        Feeds one line through the state machine.

        Returns:
            The depth the line should be rendered at. A line's own close
            applies before it is rendered; its open applies to the next line.
        """
        if self.in_tail:
            # Public-id tail: no keywords, no nesting
            return 0
        if not line.is_content:
            return self.depth
        if line.role is LineRole.MULTI_LINE_PARAM_CONTINUATION:
            self._apply(line)
            return self.span_depth
        if line.role is LineRole.VERSION:
            # The version segment ends the pipeline
            self.start_tail()
            return 0

        return self._apply(line)

    def _apply(self, line: Line) -> int:
        """Close, read depth, then open. Returns the depth in between."""
        keyword = line.keyword
        if closes_block(keyword):
            self._pop(line.line_no)

        depth = self.depth
        if line.role is LineRole.MULTI_LINE_PARAM_START:
            self.span_depth = depth + 1

        if opens_block(keyword):
            self.stack.append(Block(block_kind(keyword), line.line_no))

        return depth

    def walk(self, lines: List[Line]) -> List[int]:
        """Runs the whole document and returns one depth per line."""
        return [self.advance(line) for line in lines]
