#!/usr/bin/env python3
"""
CLDTKIT ENGINE - The High Orchestrator
--------------------------------------
Two pure entry points, format_text() and lint_text(), plus the CldtEngine
that applies them to files in a workspace with atomic writes and batch
safety. The pure functions never raise: on an unexpected failure they
degrade to returning the text unchanged or an empty diagnostic list.

Author: CldtKit Team
Date: 2026-10-17
"""

import os
import time
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Callable

from cldtkit.core.models import Diagnostic, FormattingPreference, Severity
from cldtkit.formatting.formatter import CldtFormatter
from cldtkit.rules.diagnostics import DiagnosticsLinter

logger = logging.getLogger("cldtkit.engine")


def format_text(text: str, preference: Optional[FormattingPreference] = None) -> str:
    """Returns the canonical form of a CLDT document."""
    try:
        return CldtFormatter(preference).format(text)
    except Exception as e:
        logger.error(f"Formatting failed, returning input unchanged: {str(e)}")
        return text


def lint_text(text: str) -> List[Diagnostic]:
    """Returns the diagnostics for a CLDT document (possibly empty)."""
    try:
        return DiagnosticsLinter().lint(text)
    except Exception as e:
        logger.error(f"Linting failed, reporting no diagnostics: {str(e)}")
        return []


class CldtEngine:
    """
    Principal orchestrator for CLDT files on disk.
    Reads, formats or lints, and writes back atomically.
    """

    def __init__(self, workspace_path: str,
                 preference: Optional[FormattingPreference] = None):
        self.workspace = Path(workspace_path).resolve()
        self.preference = preference or FormattingPreference()

    def format_file(self, relative_path: str, dry_run: bool = True) -> Dict[str, Any]:
        """
        Performs a full format cycle on a single document.
        """
        full_path = (self.workspace / relative_path).resolve()
        if not full_path.exists():
            return self._file_error(relative_path, "FILE_NOT_FOUND", f"Path missing: {full_path}")

        try:
            # BOM-aware read
            original = full_path.read_text(encoding='utf-8-sig')
        except (UnicodeDecodeError, OSError) as e:
            logger.error(f"Error reading {relative_path}: {str(e)}")
            return self._file_error(relative_path, "ENGINE_ERROR", str(e))

        formatted = format_text(original, self.preference)
        is_modified = formatted != original

        result = {
            "file_path": str(relative_path),
            "success": True,
            "status": self._derive_status(is_modified, dry_run),
            "modified": is_modified,
            "written": False,
            "original_content": original,
            "formatted_content": formatted if is_modified else None,
            "timestamp": time.time(),
        }

        if not dry_run and is_modified:
            try:
                self._atomic_write(full_path, formatted)
                result["written"] = True
            except IOError as e:
                logger.error(f"Write failed for {relative_path}: {str(e)}")
                result["status"] = "WRITE_ERROR"
                result["error"] = str(e)
                result["success"] = False

        return result

    def lint_file(self, relative_path: str) -> Dict[str, Any]:
        full_path = (self.workspace / relative_path).resolve()
        if not full_path.exists():
            return self._file_error(relative_path, "FILE_NOT_FOUND", f"Path missing: {full_path}")

        try:
            text = full_path.read_text(encoding='utf-8-sig')
        except (UnicodeDecodeError, OSError) as e:
            logger.error(f"Error reading {relative_path}: {str(e)}")
            return self._file_error(relative_path, "ENGINE_ERROR", str(e))

        diagnostics = lint_text(text)
        has_errors = any(d.severity is Severity.ERROR for d in diagnostics)
        return {
            "file_path": str(relative_path),
            "success": not has_errors,
            "status": "ERRORS" if has_errors else "CLEAN" if not diagnostics else "FINDINGS",
            "diagnostics": diagnostics,
            "timestamp": time.time(),
        }

    def discover(self, extensions: List[str], max_depth: int = 10) -> List[Path]:
        """
        Recursively finds documents under the workspace. Symlinks are
        skipped to prevent loops.
        """
        found = set()
        for ext in extensions:
            for pattern in (f"*{ext.lower()}", f"*{ext.upper()}"):
                for f in self.workspace.rglob(pattern):
                    if not f.is_file() or f.is_symlink():
                        continue
                    if len(f.relative_to(self.workspace).parts) > max_depth:
                        continue
                    found.add(f)
        return sorted(found)

    def scan_directory(self, extensions: List[str], lint: bool = False, dry_run: bool = True,
                       max_depth: int = 10,
                       progress_callback: Optional[Callable[[int, int], None]] = None,
                       targets: Optional[List[Path]] = None) -> List[Dict[str, Any]]:
        """
        Formats (or lints) every matching document in the workspace.
        An explicit target list skips discovery.
        """
        files = targets if targets is not None else self.discover(extensions, max_depth=max_depth)
        reports = []

        for processed, file_path in enumerate(files, 1):
            rel_path = str(file_path.relative_to(self.workspace))
            if lint:
                reports.append(self.lint_file(rel_path))
            else:
                reports.append(self.format_file(rel_path, dry_run=dry_run))
            if progress_callback:
                progress_callback(processed, len(files))

        return reports

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        total = len(reports)
        return {
            "total_files": total,
            "successful": sum(1 for r in reports if r.get('success', False)),
            "modified": sum(1 for r in reports if r.get('modified', False)),
            "written_to_disk": sum(1 for r in reports if r.get('written', False)),
            "diagnostics": sum(len(r.get('diagnostics', [])) for r in reports),
            "system_errors": sum(1 for r in reports
                                 if r.get('status') in ("ENGINE_ERROR", "WRITE_ERROR", "FILE_NOT_FOUND")),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _derive_status(self, modified: bool, dry: bool) -> str:
        if not modified:
            return "UNCHANGED"
        return "PREVIEW" if dry else "FORMATTED"

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_suffix('.cldtkit.tmp')
        try:
            temp_file.write_text(content, encoding='utf-8')
            os.replace(temp_file, target_path)
        except Exception as e:
            if temp_file.exists():
                temp_file.unlink()
            raise IOError(f"Atomic write failed: {str(e)}")

    def _file_error(self, path: str, status: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": path, "status": status, "error": error,
            "success": False, "modified": False,
        }
