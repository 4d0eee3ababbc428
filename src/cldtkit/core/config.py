#!/usr/bin/env python3
"""
CLDTKIT CONFIG - Project Preferences
------------------------------------
Loads formatting preferences from a .cldtkit.yaml file found in the
target directory or any of its parents:

    indent_style: space      # or "tab"
    indent_width: 2
    comment_column: 30
    extensions: [.cldt]

A missing file means defaults. A malformed file is logged and ignored.

Author: CldtKit Team
Date: 2026-10-17
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML, YAMLError

from cldtkit.core.models import FormattingPreference

logger = logging.getLogger("cldtkit.config")

CONFIG_FILE_NAME = ".cldtkit.yaml"
DEFAULT_EXTENSIONS = [".cldt"]


@dataclass
class CldtConfig:
    preference: FormattingPreference = field(default_factory=FormattingPreference)
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    source: Optional[Path] = None


def find_config(start: Path) -> Optional[Path]:
    """Walks from start (file or directory) up to the filesystem root."""
    current = start.resolve()
    if current.is_file():
        current = current.parent
    for directory in [current, *current.parents]:
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _as_int(data: Dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    try:
        value = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {key} '{value}'. Falling back to default: {default}")
        return default
    if value < 0:
        logger.warning(f"Negative {key} '{value}'. Falling back to default: {default}")
        return default
    return value


def parse_config(data: Any, source: Optional[Path] = None) -> CldtConfig:
    """Builds a CldtConfig from an already-loaded YAML mapping."""
    if not isinstance(data, dict):
        if data is not None:
            logger.warning(f"Ignoring {source or 'config'}: top level must be a mapping")
        return CldtConfig(source=source)

    defaults = FormattingPreference()
    style = str(data.get("indent_style", "space")).lower()
    if style not in ("space", "tab"):
        logger.warning(f"Unknown indent_style '{style}'. Falling back to 'space'")
        style = "space"

    preference = FormattingPreference(
        indent_uses_spaces=style == "space",
        indent_width=_as_int(data, "indent_width", defaults.indent_width),
        comment_column=_as_int(data, "comment_column", defaults.comment_column),
    )

    extensions = data.get("extensions", DEFAULT_EXTENSIONS)
    if isinstance(extensions, str):
        extensions = [extensions]
    extensions = [e if str(e).startswith(".") else f".{e}" for e in extensions] or list(DEFAULT_EXTENSIONS)

    return CldtConfig(preference=preference, extensions=[str(e) for e in extensions], source=source)


def load_config(start: Path) -> CldtConfig:
    path = find_config(start)
    if path is None:
        return CldtConfig()

    yaml = YAML(typ='safe')
    try:
        data = yaml.load(path.read_text(encoding='utf-8-sig'))
    except (YAMLError, OSError) as e:
        logger.warning(f"Could not read {path}: {str(e)}. Using defaults")
        return CldtConfig()

    logger.info(f"Loaded preferences from {path}")
    return parse_config(data, source=path)
