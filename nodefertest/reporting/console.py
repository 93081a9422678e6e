# Rich console output: format findings for terminal display.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from nodefertest.findings.models import Finding


# Remediation hints per rule (shown with --verbose)
RULE_REMEDIATIONS: dict[str, str] = {
    "nodefertest": (
        "Register cleanup with t.Cleanup(fn) (or b.Cleanup(fn)); cleanups run even "
        "when t.Fatal/t.FailNow end the test through runtime.Goexit."
    ),
}

# Severity → Rich style
SEVERITY_STYLE = {
    "error": "bold red",
    "warning": "bold yellow",
    "info": "bold blue",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: str) -> str:
    return SEVERITY_STYLE.get(severity.lower(), DEFAULT_SEVERITY_STYLE)


def _get_remediation(finding: Finding) -> str | None:
    """Return remediation hint for a finding, or None if unknown."""
    return RULE_REMEDIATIONS.get(finding.rule_id)


def print_findings(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path] | None = None,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Print findings grouped by file, colored by severity, with the offending
    line as a snippet. If verbose, shows remediation hints. If analyzed_files
    is provided, also shows a file-by-file summary table.
    """
    if console is None:
        console = Console()

    if not findings and not analyzed_files:
        console.print(
            Panel(
                "[green]No defer statements in test functions.[/green]",
                title="nodefertest",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    if not findings and analyzed_files:
        _print_file_summary_table([], analyzed_files, console)
        return

    by_file: dict[str, list[Finding]] = {}
    for f in findings:
        by_file.setdefault(str(f.location.path), []).append(f)

    for path in sorted(by_file.keys()):
        file_findings = sorted(by_file[path], key=lambda x: (x.location.line, x.location.column))

        console.print()
        console.print(Panel(
            f"[bold cyan]{_shorten_path(path)}[/bold cyan]",
            box=box.SIMPLE_HEAD,
            border_style="blue",
            padding=(0, 1),
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Col", justify="right", style="dim", width=4)
        table.add_column("Severity", width=10)
        table.add_column("Code", style="white")

        for f in file_findings:
            loc = f.location
            table.add_row(
                str(loc.line),
                str(loc.column),
                Text(f.severity.upper(), style=_severity_style(f.severity)),
                Text((loc.snippet or "").strip()),
            )

        console.print(table)
        # all findings of one rule share a message; print it once per file
        for message in sorted({f.message for f in file_findings}):
            console.print(f"  [dim]|--[/dim] {message}")

        if verbose:
            seen_rules: set[str] = set()
            for f in file_findings:
                if f.rule_id not in seen_rules:
                    seen_rules.add(f.rule_id)
                    rem = _get_remediation(f)
                    if rem:
                        console.print(f"  [dim]Fix ({f.rule_id}):[/dim] {rem}")

    if analyzed_files:
        _print_file_summary_table(findings, analyzed_files, console)

    _print_summary(findings, console)


def _shorten_path(path: str | Path) -> str:
    """Return the path relative to the current directory when possible."""
    p = Path(path)
    try:
        return str(p.relative_to(Path.cwd()))
    except ValueError:
        return str(p)


def _print_file_summary_table(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path],
    console: Console,
) -> None:
    """Print a table of clean vs flagged files."""
    by_path: dict[str, int] = {}
    for f in findings:
        key = str(f.location.path)
        by_path[key] = by_path.get(key, 0) + 1

    clean_files = [p for p in analyzed_files if str(p) not in by_path]
    flagged_files = [p for p in analyzed_files if str(p) in by_path]

    table = Table(
        title="Files Summary",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("File", style="white")
    table.add_column("Status", width=10)
    table.add_column("Findings", justify="right", width=8)

    for p in sorted(flagged_files, key=str):
        table.add_row(
            _shorten_path(p),
            Text("DEFER", style="bold yellow"),
            str(by_path[str(p)]),
        )
    for p in sorted(clean_files, key=str):
        table.add_row(
            _shorten_path(p),
            Text("OK", style="bold green"),
            "0",
        )

    console.print()
    console.print(Panel(table, border_style="cyan", box=box.ROUNDED))


def _print_summary(findings: Sequence[Finding], console: Console) -> None:
    """Print a compact summary of findings."""
    by_severity: dict[str, int] = {}
    for f in findings:
        s = f.severity.lower()
        by_severity[s] = by_severity.get(s, 0) + 1

    total = len(findings)
    summary_parts = [f"[bold]{total} finding{'s' if total != 1 else ''}[/bold]"]
    for sev in ("error", "warning", "info"):
        if sev in by_severity:
            summary_parts.append(
                f"[{_severity_style(sev)}]{by_severity[sev]} {sev}[/]"
            )

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if total > 0 else "green",
            box=box.ROUNDED,
        )
    )
