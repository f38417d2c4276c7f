from __future__ import annotations

"""
Typer CLI entry point.

`clint lint` resolves the targets into C files, loads configuration, and hands
everything to the Driver; the process exits with the driver's ExitStatus value.
`clint rules` lists the rule catalog.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from clint.config import Config, ConfigError, find_config_file, get_default_config, load_config
from clint.context import load_source_files
from clint.driver import Driver, ExitStatus
from clint.findings.models import Severity
from clint.rules.catalog import RULES
from clint.traversal import collect_sources

logger = logging.getLogger(__name__)

app = typer.Typer(help="clint - static analysis driver for C source files.")

SEVERITY_STYLE = {
    Severity.CRITICAL: "bold red",
    Severity.MAJOR: "bold yellow",
    Severity.MINOR: "bold blue",
    Severity.COSMETIC: "dim",
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def parse_thresholds(values: List[str]) -> dict[str, int]:
    """Turn ["major=5", ...] into {"major": 5}."""
    thresholds: dict[str, int] = {}
    for value in values:
        key, sep, number = value.partition("=")
        severity = Severity.from_key(key)
        if not sep or severity is None:
            raise typer.BadParameter(
                f"Expected SEVERITY=COUNT with SEVERITY one of "
                f"{', '.join(s.value for s in Severity)}, got: {value}"
            )
        try:
            thresholds[severity.value] = int(number)
        except ValueError:
            raise typer.BadParameter(f"Threshold count must be an integer, got: {value}")
    return thresholds


def _resolve_config(config_path: Optional[Path], targets: List[Path]) -> Config:
    if config_path is None and targets:
        config_path = find_config_file(targets[0])
    if config_path is None:
        return get_default_config()
    try:
        return load_config(config_path)
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--config")


@app.command()
def lint(
    targets: List[Path] = typer.Argument(
        ...,
        exists=True,
        readable=True,
        help="C files or directories to analyze.",
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Configuration file."
    ),
    rules: Optional[List[str]] = typer.Option(
        None, "--rule", "-r", help="Rule id to enable (repeatable); overrides the config."
    ),
    report_type: Optional[str] = typer.Option(
        None, "--report-type", help="text, html, json, pmd or xcode."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", dir_okay=False, help="Write the report to a file."
    ),
    thresholds: Optional[List[str]] = typer.Option(
        None, "--threshold", "-t", help="Maximum issue count, e.g. major=5 (repeatable)."
    ),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", min=1, help="Worker threads."),
    include_headers: bool = typer.Option(False, "--include-headers", help="Also lint .h files."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Lint C source files and report issues."""
    configure_logging(verbose)
    config = _resolve_config(config_path, targets)

    severity_thresholds = dict(config.severity_thresholds)
    severity_thresholds.update(parse_thresholds(thresholds or []))

    paths = collect_sources(
        targets,
        include_headers=include_headers or config.include_headers,
        ignore_dirs=config.ignore_dirs,
    )
    source_files = load_source_files(paths)

    out = output.open("w", encoding="utf-8") if output else sys.stdout
    try:
        driver = Driver(
            rule_identifiers=rules or config.rules,
            report_type=report_type or config.report_type,
            output=out,
            jobs=jobs or config.jobs,
        )
        status = driver.lint(
            source_files,
            rule_configurations=config.rule_configurations,
            severity_thresholds=severity_thresholds,
        )
    finally:
        if output:
            out.close()

    if status is not ExitStatus.SUCCESS:
        logger.info("Exiting with %s", status.name)
    raise typer.Exit(code=int(status))


@app.command("rules")
def list_rules() -> None:
    """List every rule clint knows about."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Severity")
    for rule in RULES:
        table.add_row(
            rule.id,
            rule.name,
            rule.category,
            f"[{SEVERITY_STYLE[rule.severity]}]{rule.severity.value}[/]",
        )
    Console().print(table)


def main() -> None:
    """Entry point for the `clint` script and `python -m clint.main`."""
    app()


if __name__ == "__main__":
    main()
