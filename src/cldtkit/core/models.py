#!/usr/bin/env python3
"""
CLDTKIT CORE MODELS
-------------------
Defines the fundamental data structures used across the CldtKit engine.
These models represent the lowest level of CLDT document abstraction:
classified lines, open blocks, decomposed URLs and diagnostics.

Author: CldtKit Team
Date: 2026-10-17
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Dict, Any


class LineRole(str, Enum):
    """Structural role of a single physical line."""
    BLANK = "blank"
    COMMENT_ONLY = "commentOnly"
    URL = "url"
    TRANSFORMATION = "transformation"
    VERSION = "version"
    PUBLIC_ID = "publicId"
    MULTI_LINE_PARAM_START = "multiLineParamStart"
    MULTI_LINE_PARAM_CONTINUATION = "multiLineParamContinuation"


class Delimiter(str, Enum):
    NONE = ""
    COMMA = ","
    SLASH = "/"


class BlockKind(str, Enum):
    CONDITIONAL = "conditional"
    LAYER = "layer"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass(frozen=True)
class Line:
    """
    The atomic unit of a CLDT document.

    A Line is one physical line of text after classification. The
    trailing delimiter is read from the code part only, so an inline
    comment never changes it.
    """
    raw_text: str                            # The original unmutated line
    trimmed_text: str                        # raw_text with outer whitespace removed
    role: LineRole
    trailing_delimiter: Delimiter = Delimiter.NONE
    comment_suffix: Optional[str] = None     # "# ..." split off a content line
    line_no: int = 0                         # 0-based position in the document

    @property
    def code(self) -> str:
        """Trimmed text without the inline comment."""
        if self.comment_suffix is None:
            return self.trimmed_text
        return self.trimmed_text[:len(self.trimmed_text) - len(self.comment_suffix)].strip()

    @property
    def keyword(self) -> str:
        """Code part with trailing commas and slashes stripped."""
        return self.code.rstrip(",/")

    @property
    def is_content(self) -> bool:
        return self.role not in (LineRole.BLANK, LineRole.COMMENT_ONLY)


@dataclass
class Block:
    """An open conditional or layer region on the tracker stack."""
    kind: BlockKind
    opened_at_line: int
    is_open: bool = True


@dataclass(frozen=True)
class DecomposedUrl:
    """
    A delivery URL split into its pipeline parts.

    prefix keeps its trailing slash, e.g.
    "https://res.cloudinary.com/demo/image/upload/".
    """
    prefix: str
    transformations: List[str] = field(default_factory=list)
    version: Optional[str] = None
    public_id: List[str] = field(default_factory=list)

    def to_url(self) -> str:
        parts = list(self.transformations)
        if self.version:
            parts.append(self.version)
        parts.extend(self.public_id)
        return self.prefix + "/".join(parts)


@dataclass(frozen=True)
class DiagnosticRange:
    line: int
    start_column: int
    end_column: int


@dataclass(frozen=True)
class Diagnostic:
    """
    A single structural or semantic finding. Produced fresh on every
    lint run; nothing is carried between runs.
    """
    range: DiagnosticRange
    message: str
    severity: Severity
    code: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


@dataclass(frozen=True)
class FormattingPreference:
    """Indentation settings supplied by the caller (editor or config file)."""
    indent_uses_spaces: bool = True
    indent_width: int = 2
    comment_column: int = 30

    @property
    def indent_unit(self) -> str:
        if self.indent_uses_spaces:
            return " " * max(0, self.indent_width)
        return "\t"
