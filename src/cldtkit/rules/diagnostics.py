#!/usr/bin/env python3
"""
CLDTKIT DIAGNOSTICS - Lint Rules
--------------------------------
The DiagnosticsLinter walks the same classified Lines the formatter uses
and runs every line through a registry of rules. Each rule looks at one
line in isolation and returns zero or more Diagnostics; the only
document-level check is the block balance, which replays the BlockTracker.

Author: CldtKit Team
Date: 2026-10-17
"""

import re
from typing import Callable, Dict, List

from cldtkit.core.models import Diagnostic, DiagnosticRange, Line, LineRole, Severity
from cldtkit.formatting.blocks import BlockTracker
from cldtkit.formatting.lexer import CldtLexer

Rule = Callable[[Line], List[Diagnostic]]

# Lines matching any of these are valid CLDT and skip the syntax rules
CLDT_SYNTAX_PATTERNS = [
    re.compile(r'^https?://'),                                 # URL
    re.compile(r'^[\w_]+_[\w_:!$()]+[,/]?\s*(#.*)?$'),         # w_800/ or Rubik_
    re.compile(r'^\$\w+_'),                                    # variable assignment
    re.compile(r'^\$\(?[\w]+\)?'),                             # variable reference
    re.compile(r'^if_'),                                       # control flow
    re.compile(r'\.(jpg|png|gif|webp|mp4|pdf)$', re.IGNORECASE),
]

PROPERTY_WITHOUT_COLON = re.compile(r'^\s*(\w+)\s+([^:/{_])')

# code -> (pattern, low, high, severity, label)
NUMERIC_RANGES = {
    "invalid-quality": (re.compile(r'quality\s*:\s*(-?\d+)', re.IGNORECASE), 1, 100, Severity.WARNING, "Quality"),
    "invalid-opacity": (re.compile(r'opacity\s*:\s*(-?\d+)', re.IGNORECASE), 0, 100, Severity.WARNING, "Opacity"),
    "angle-out-of-range": (re.compile(r'angle\s*:\s*(-?\d+)', re.IGNORECASE), -360, 360, Severity.INFO, "Angle"),
}

# deprecated name -> replacement
DEPRECATED_PROPERTIES: Dict[str, str] = {
    "fetch_format": "format",
}

COMMENT_PREFIXES = ("#", "//", "/*")


def is_cldt_syntax(trimmed: str) -> bool:
    if trimmed.endswith("/") or trimmed.endswith(","):
        return True
    return any(p.search(trimmed) for p in CLDT_SYNTAX_PATTERNS)


def _diagnostic(line_no: int, start: int, end: int, message: str,
                severity: Severity, code: str) -> Diagnostic:
    return Diagnostic(DiagnosticRange(line_no, start, end), message, severity, code)


class DiagnosticsLinter:
    """
    The rule library for CLDT documents. Never raises on malformed input;
    anything it cannot make sense of is simply not reported.
    """

    def __init__(self):
        self.lexer = CldtLexer()

        # Registry of per-line rules, run in order against every line
        self.syntax_rules: List[Rule] = [
            self._rule_missing_colon,
            self._rule_unmatched_braces,
        ]
        self.value_rules: List[Rule] = [
            self._rule_numeric_ranges,
            self._rule_deprecated_properties,
        ]

    def lint(self, text: str) -> List[Diagnostic]:
        lines = self.lexer.tokenize(text)
        diagnostics: List[Diagnostic] = []

        for line in lines:
            if not line.trimmed_text or line.trimmed_text.startswith(COMMENT_PREFIXES):
                continue
            # Text inside an open multi-line parameter is free-form
            if line.role is LineRole.MULTI_LINE_PARAM_CONTINUATION:
                continue

            if line.role is not LineRole.MULTI_LINE_PARAM_START:
                for rule in self.syntax_rules:
                    diagnostics.extend(rule(line))
            for rule in self.value_rules:
                diagnostics.extend(rule(line))

        diagnostics.extend(self._check_block_balance(lines))
        diagnostics.sort(key=lambda d: d.range.line)
        return diagnostics

    def _rule_missing_colon(self, line: Line) -> List[Diagnostic]:
        """Catches 'quality 80' written instead of 'quality: 80'."""
        raw = line.raw_text
        if is_cldt_syntax(line.trimmed_text) or "//" in raw or "#" in raw:
            return []
        match = PROPERTY_WITHOUT_COLON.match(raw)
        if not match:
            return []
        name = match.group(1)
        return [_diagnostic(
            line.line_no, match.start(1), match.end(1),
            f"Property '{name}' should be followed by a colon",
            Severity.ERROR, "missing-colon",
        )]

    def _rule_unmatched_braces(self, line: Line) -> List[Diagnostic]:
        raw = line.raw_text
        if is_cldt_syntax(line.trimmed_text):
            return []
        if raw.count("{") == raw.count("}"):
            return []
        return [_diagnostic(line.line_no, 0, len(raw), "Unmatched braces",
                            Severity.WARNING, "unmatched-braces")]

    def _rule_numeric_ranges(self, line: Line) -> List[Diagnostic]:
        found = []
        for code, (pattern, low, high, severity, label) in NUMERIC_RANGES.items():
            match = pattern.search(line.raw_text)
            if not match:
                continue
            try:
                value = int(match.group(1))
            except ValueError:
                continue
            if low <= value <= high:
                continue
            found.append(_diagnostic(
                line.line_no, match.start(1), match.end(1),
                f"{label} value should be between {low} and {high} (got {value})",
                severity, code,
            ))
        return found

    def _rule_deprecated_properties(self, line: Line) -> List[Diagnostic]:
        found = []
        for name, replacement in DEPRECATED_PROPERTIES.items():
            match = re.search(rf'\b{re.escape(name)}\b', line.raw_text, re.IGNORECASE)
            if match:
                found.append(_diagnostic(
                    line.line_no, match.start(), match.end(),
                    f"'{name}' is deprecated. Use '{replacement}' instead",
                    Severity.HINT, "deprecated-property",
                ))
        return found

    def _check_block_balance(self, lines: List[Line]) -> List[Diagnostic]:
        """
        The formatter clamps an extra if_end / fl_layer_apply to depth 0
        without complaint. Report it here instead.
        """
        tracker = BlockTracker()
        tracker.walk(lines)
        found = []
        for line_no in tracker.excess_closes:
            line = lines[line_no]
            start = len(line.raw_text) - len(line.raw_text.lstrip())
            found.append(_diagnostic(
                line_no, start, len(line.raw_text.rstrip()),
                f"'{line.keyword}' closes a block that was never opened",
                Severity.WARNING, "unmatched-block-end",
            ))
        return found
