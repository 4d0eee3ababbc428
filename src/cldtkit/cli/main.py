#!/usr/bin/env python3
"""
CLDTKIT CLI - Formatter & Linter Front-End
------------------------------------------
Orchestrates:
1. Subcommand Routing (fmt/lint)
2. Preference Resolution (.cldtkit.yaml + flags)
3. Visual Diffing (--diff) and Diagnostic Tables
4. Progress Tracking & Summary

Author: CldtKit Team
Date: 2026-10-17
"""

import sys
import logging
import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Dict, Any

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    BarColumn,
    TaskProgressColumn
)

from cldtkit.cli.reporter import CldtReporter
from cldtkit.core.config import CldtConfig, load_config
from cldtkit.core.engine import CldtEngine

__version__ = "0.1.0"

console = Console()
logger = logging.getLogger("cldtkit.cli")


class CldtKitCLI:
    """
    CLI wrapper that translates user commands into Engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="cldtkit",
            description="CldtKit - Formatter & Linter for CLDT transformation documents",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.reporter = CldtReporter()
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=f"cldtkit v{__version__}")
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        fmt_parser = subparsers.add_parser("fmt", help="Rewrite documents in canonical form")
        fmt_parser.add_argument("path", help="Path to a CLDT file or directory")
        fmt_parser.add_argument("--check", action="store_true", help="Exit 1 if any file would change; write nothing")
        fmt_parser.add_argument("--dry-run", action="store_true", help="Preview results without writing")
        fmt_parser.add_argument("--diff", action="store_true", help="Display a unified diff per file")
        fmt_parser.add_argument("--tabs", action="store_true", help="Indent with tabs instead of spaces")
        fmt_parser.add_argument("--indent", type=int, default=None, help="Spaces per indent level")
        fmt_parser.add_argument("--ext", action="append", default=None, help="File extension filter (repeatable)")

        lint_parser = subparsers.add_parser("lint", help="Report structural and value problems")
        lint_parser.add_argument("path", help="Path to a CLDT file or directory")
        lint_parser.add_argument("--json", action="store_true", help="Emit diagnostics as JSON")
        lint_parser.add_argument("--ext", action="append", default=None, help="File extension filter (repeatable)")

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            f"[bold cyan]CldtKit v{__version__}[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _resolve_config(self, args: argparse.Namespace, input_path: Path) -> CldtConfig:
        """Config file first, command-line flags override."""
        config = load_config(input_path)
        preference = config.preference
        if getattr(args, "tabs", False):
            preference = replace(preference, indent_uses_spaces=False)
        if getattr(args, "indent", None) is not None:
            preference = replace(preference, indent_width=max(0, args.indent))
        extensions = args.ext or config.extensions
        return CldtConfig(preference=preference, extensions=extensions, source=config.source)

    def _collect(self, engine: CldtEngine, input_path: Path, config: CldtConfig) -> List[Path]:
        if input_path.is_file():
            return [input_path]
        return engine.discover(config.extensions)

    def _show_findings(self, reports: List[Dict[str, Any]], is_lint: bool, show_diff: bool):
        for report in reports:
            rel_path = report["file_path"]
            if is_lint and report.get("diagnostics"):
                self.reporter.show_diagnostics(rel_path, report["diagnostics"])
            elif show_diff and report.get("modified"):
                self.reporter.display_diff(report["original_content"], report["formatted_content"], rel_path)

    def _run_engine(self, args: argparse.Namespace, is_lint: bool) -> int:
        """Main processing loop. Returns the process exit code."""
        input_path = Path(args.path).resolve()
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 2

        config = self._resolve_config(args, input_path)
        workspace = input_path if input_path.is_dir() else input_path.parent
        engine = CldtEngine(str(workspace), config.preference)

        target_files = self._collect(engine, input_path, config)
        if not target_files:
            console.print(f"\n[bold yellow]⚠️  No CLDT files found ({', '.join(config.extensions)}).[/bold yellow]")
            return 0

        dry_run = is_lint or args.dry_run or args.check
        quiet = is_lint and args.json
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
            disable=quiet,
        ) as progress:
            task_id = progress.add_task("Processing documents...", total=len(target_files))

            def advance(done: int, total: int):
                progress.update(task_id, completed=done, description=f"Checked: {done}/{total}")

            reports = engine.scan_directory(
                config.extensions, lint=is_lint, dry_run=dry_run,
                progress_callback=advance, targets=target_files,
            )

        if quiet:
            self.reporter.print_json(reports)
        else:
            self._show_findings(reports, is_lint, not is_lint and args.diff)
            self.reporter.print_final_table(reports)
            self.reporter.print_summary(engine.generate_summary(reports))

        if any(r.get("status") in ("ENGINE_ERROR", "WRITE_ERROR", "FILE_NOT_FOUND") for r in reports):
            return 2
        if is_lint:
            return 0 if all(r.get("success") for r in reports) else 1
        if args.check and any(r.get("modified") for r in reports):
            return 1
        return 0

    def run(self, argv=None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        if args.command == "fmt":
            self.print_header("CLDT Formatter")
            return self._run_engine(args, is_lint=False)
        if args.command == "lint":
            if not args.json:
                self.print_header("CLDT Linter")
            return self._run_engine(args, is_lint=True)

        self.parser.print_help()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(CldtKitCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
