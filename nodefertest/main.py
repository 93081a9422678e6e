from __future__ import annotations

"""
Typer CLI entry point and orchestration of the analysis pipeline.

The `analyze` command:
- Accepts a .go file or a directory
- Finds *_test.go files (or every .go file with --all-files) under directories
- Builds a FileContext for each file
- Runs all enabled rules from config.py
- Prints findings as "file:line:col: message", or a Rich report with --pretty

Exit status is 1 when anything was reported, so the command can gate CI.
"""

import logging
from pathlib import Path
from typing import List, Sequence

import typer

from nodefertest.config import Config, get_default_config, get_enabled_rules
from nodefertest.context import load_contexts
from nodefertest.findings.models import Finding
from nodefertest.reporting.console import print_findings
from nodefertest.traversal import find_source_files, is_go_file

logger = logging.getLogger(__name__)

app = typer.Typer(help="nodefertest - flag defer statements in Go test functions.")


def _collect_go_files(target: Path, config: Config) -> List[Path]:
    """
    Resolve a target path into a list of .go files to analyze.

    - If target is a .go file, return [target] (even if not a _test.go file)
    - If target is a directory, use traversal.find_source_files()
    - Otherwise, exit with an error.
    """
    if target.is_file():
        if not is_go_file(target):
            raise typer.BadParameter(f"Target file must have .go extension, got: {target}")
        return [target]

    if target.is_dir():
        files = find_source_files(
            target,
            tests_only=config.tests_only,
            ignore_dirs=config.ignore_dirs,
        )
        if not files:
            logger.warning("No Go files found under %s", target)
        return files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def _print_findings(findings: Sequence[Finding]) -> None:
    """Print findings in go vet's grep-like format."""
    if not findings:
        typer.echo("No findings.")
        return

    for f in sorted(findings, key=lambda x: (str(x.location.path), x.location.line, x.location.column)):
        typer.echo(f.format_line())


def run_analysis(files: Sequence[Path], config: Config) -> List[Finding]:
    """Run every enabled rule over every readable file and collect the findings."""
    all_findings: List[Finding] = []
    rules = list(get_enabled_rules(config))

    # unreadable files are logged and left out by load_contexts
    for ctx in load_contexts(list(files)):
        for rule in rules:
            try:
                rule_findings = rule.run(ctx, config)
            except Exception as exc:  # pragma: no cover - defensive
                logger.exception("Rule %s failed on %s: %s", rule.id, ctx.path, exc)
                continue
            all_findings.extend(rule_findings)

    return all_findings


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Go file or directory to analyze.",
    ),
    all_files: bool = typer.Option(
        False,
        "--all-files",
        help="Scan every .go file in directories, not only *_test.go files.",
    ),
    pretty: bool = typer.Option(False, "--pretty", help="Rich report grouped by file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show remediation hints (with --pretty)."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    """
    Analyze a single Go file or the Go files under a directory.

    Uses the rules registered in config.get_default_config().
    """
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config: Config = get_default_config()
    config.tests_only = not all_files

    if not get_enabled_rules(config):
        typer.echo("No rules are enabled in the current configuration.")
        raise typer.Exit(code=1)

    files = _collect_go_files(target, config)
    findings = run_analysis(files, config)

    if pretty:
        print_findings(findings, analyzed_files=files, verbose=verbose)
    else:
        _print_findings(findings)

    if findings:
        raise typer.Exit(code=1)


@app.command()
def rules() -> None:
    """List enabled rules and what they check."""
    for rule in get_enabled_rules():
        typer.echo(f"{rule.id}: {rule.name}")
        if rule.doc:
            typer.echo(f"    {rule.doc}")


def main() -> None:
    """Entry point for `python -m nodefertest.main` and the console script."""
    app()


if __name__ == "__main__":
    main()
