"""Table output formatter for sourcesecure.

This module renders scan results for the console using Rich: a findings
table, an optional detail section with remediation advice, the history
findings, and a severity summary.
"""

from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sourcesecure.core.models import Finding, ScanResult, Severity
from sourcesecure.core.report import BEST_PRACTICES, get_remediation, group_by_severity
from sourcesecure.outputs import BaseOutput

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}


def _location(finding: Finding) -> str:
    if finding.line:
        return f"{finding.file_path}:{finding.line}"
    return finding.file_path


def _severity_label(severity: Severity) -> str:
    style = SEVERITY_COLORS.get(severity, "white")
    return f"[{style}]{severity.value.upper()}[/{style}]"


class TableOutput(BaseOutput):
    """Output formatter that renders ScanResult as Rich tables.

    Args:
        verbose: Add per-finding details, remediation advice and security
            best practices.
        color: Emit ANSI styling. Disable for plain-text output.
        width: Console width used for rendering.
    """

    def __init__(self, verbose: bool = False, color: bool = True, width: int = 120):
        self.verbose = verbose
        self.color = color
        self.width = width

    @property
    def name(self) -> str:
        return "table"

    def format(self, result: ScanResult) -> str:
        string_io = StringIO()
        console = Console(
            file=string_io,
            force_terminal=self.color,
            no_color=not self.color,
            width=self.width,
            highlight=False,
        )

        if result.findings:
            console.print(self._findings_table(f"Scan Results: {escape(result.target_path)}", result.findings))
        else:
            console.print("[green]No secrets found.[/green]")

        if self.verbose and result.findings:
            self._print_details(console, result.findings)

        if result.history_findings:
            console.print()
            console.print(self._history_table(result.history_findings))

        self._print_summary(console, result)
        return string_io.getvalue()

    def _findings_table(self, title: str, findings: list[Finding]) -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Severity", justify="center")
        table.add_column("Type", style="cyan")
        table.add_column("Location", style="white", no_wrap=False)
        table.add_column("Match", style="magenta", no_wrap=False)
        table.add_column("Found by", style="dim")

        for findings_at_level in group_by_severity(findings).values():
            for finding in findings_at_level:
                found_by = [finding.source, *finding.verified_by]
                table.add_row(
                    _severity_label(finding.severity),
                    escape(finding.detector_name),
                    escape(_location(finding)),
                    escape(finding.match),
                    escape(", ".join(found_by)) + (" [green](verified)[/green]" if finding.verified else ""),
                )
        return table

    def _history_table(self, findings: list[Finding]) -> Table:
        table = Table(title="Git History", show_header=True, header_style="bold cyan")
        table.add_column("Commit", style="yellow")
        table.add_column("Severity", justify="center")
        table.add_column("Type", style="cyan")
        table.add_column("File", style="white", no_wrap=False)
        table.add_column("Match", style="magenta", no_wrap=False)
        for finding in findings:
            table.add_row(
                escape(finding.commit or ""),
                _severity_label(finding.severity),
                escape(finding.detector_name),
                escape(finding.file_path),
                escape(finding.match),
            )
        return table

    def _print_details(self, console: Console, findings: list[Finding]) -> None:
        console.print()
        console.print("[bold]Details[/bold]")
        for severity, group in group_by_severity(findings).items():
            for finding in group:
                console.print(f"{_severity_label(severity)} {escape(finding.detector_name)}")
                console.print(f"  File: {escape(_location(finding))}")
                console.print(f"  Match: {escape(finding.match)}")
                if finding.decoded:
                    console.print(f"  Decoded: {escape(finding.decoded)}")
                if finding.verified_by:
                    console.print(f"  Verified by: {escape(', '.join(finding.verified_by))}")
                for line in get_remediation(finding):
                    console.print(f"  {escape(line)}")

        console.print()
        console.print("[bold]Security Best Practices[/bold]")
        for number, practice in enumerate(BEST_PRACTICES, start=1):
            console.print(f"  {number}. {practice}")

    def _print_summary(self, console: Console, result: ScanResult) -> None:
        stats = result.stats
        console.print()
        console.print("[bold]Scan Summary[/bold]")
        console.print(f"  Duration: {result.scan_duration:.2f}s")
        if "files_scanned" in stats:
            console.print(f"  Files scanned: {stats['files_scanned']}")
        if stats.get("archives_scanned"):
            console.print(f"  Archives scanned: {stats['archives_scanned']}")
        if stats.get("external_findings"):
            console.print(f"  External tool findings: {stats['external_findings']}")
        console.print(f"  Total findings: {len(result.findings)}")
        for severity, group in group_by_severity(result.findings).items():
            console.print(f"    {_severity_label(severity)}: {len(group)}")
        if result.history_findings:
            console.print(f"  History findings: {len(result.history_findings)}")
        warnings = stats.get("warnings") or []
        if warnings:
            console.print(f"  Warnings: {len(warnings)}")
