# src/cldtkit/cli/reporter.py
import difflib
import json
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from cldtkit.core.models import Severity

# Initialize the Rich console for high-quality terminal output
console = Console()

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
    Severity.HINT: "dim",
}


class CldtReporter:
    """
    CldtReporter: The visual heart of the CLI.
    Responsible for rendering Diffs, Diagnostics and Execution Reports.
    """

    def display_diff(self, original_text: str, formatted_text: str, file_name: str):
        """
        Renders a colorized unified diff between the original document
        and its canonical form.
        """
        if formatted_text is None:
            return

        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            formatted_text.splitlines(),
            fromfile=f"original/{file_name}",
            tofile=f"formatted/{file_name}",
            lineterm=""
        ))

        if not diff_list:
            console.print(f"[dim]ℹ No formatting changes needed for {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        console.print(Panel(
            syntax,
            title=f"Proposed Formatting: {file_name}",
            border_style="green"
        ))

    def show_diagnostics(self, file_name: str, diagnostics: List[Any]):
        if not diagnostics:
            return

        table = Table(title=file_name, show_header=True, header_style="bold magenta")
        table.add_column("Line", justify="right")
        table.add_column("Col", justify="right")
        table.add_column("Severity")
        table.add_column("Code", style="cyan")
        table.add_column("Message")

        for d in diagnostics:
            style = SEVERITY_STYLES.get(d.severity, "white")
            table.add_row(
                # 1-based for humans
                str(d.range.line + 1),
                str(d.range.start_column + 1),
                f"[{style}]{d.severity.value}[/{style}]",
                d.code,
                d.message,
            )
        console.print(table)

    def print_json(self, reports: List[Dict[str, Any]]):
        payload = [
            {
                "file_path": r.get("file_path"),
                "status": r.get("status"),
                "diagnostics": [d.to_dict() for d in r.get("diagnostics", [])],
            }
            for r in reports
        ]
        # Plain print keeps the output machine-readable
        print(json.dumps(payload, indent=2))

    def print_final_table(self, reports: List[Dict[str, Any]]):
        """
        Builds the summary table shown at the very end of a run.
        """
        table = Table(title="CldtKit Execution Report", show_header=True, header_style="bold magenta")
        table.add_column("File Path", style="dim")
        table.add_column("Status")
        table.add_column("Result", justify="center")

        for r in reports:
            if r.get("error"):
                console.print(f"[bold red]Error in {r['file_path']}:[/bold red] {r['error']}")
            result_icon = "✅" if r.get("success") else "❌"
            table.add_row(str(r.get("file_path")), str(r.get("status")), result_icon)

        console.print(table)

    def print_summary(self, summary: Dict[str, Any]):
        console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:     {summary['total_files']}\n"
            f"Successful:      [green]{summary['successful']}[/green]\n"
            f"Modified:        {summary['modified']}\n"
            f"Written:         {summary['written_to_disk']}\n"
            f"Diagnostics:     {summary['diagnostics']}\n"
            f"System Errors:   [red]{summary['system_errors']}[/red]",
            border_style="dim"
        ))
