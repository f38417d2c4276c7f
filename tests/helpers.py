"""Shared helpers for building contexts and issues in tests."""

from pathlib import Path
from typing import Any, Mapping, Optional

from clint.context import AnalysisContext, SourceFile
from clint.findings.ledger import IssueLedger
from clint.findings.models import Issue, Location, Severity
from clint.parser import create_parser, parse_bytes


def make_context(source: bytes, path: Path | None = None) -> AnalysisContext:
    if path is None:
        path = Path("test.c")
    tree = parse_bytes(source, parser=create_parser())
    return AnalysisContext(source_file=SourceFile(path=path, content=source), tree=tree)


def run_rule(
    rule,
    source: bytes,
    configurations: Optional[Mapping[str, Any]] = None,
    path: Path | None = None,
) -> tuple[Issue, ...]:
    """Parse source, run one rule over it, return what it recorded."""
    ledger = IssueLedger()
    rule.inspect(make_context(source, path), ledger, configurations)
    return ledger.drain()


def make_issue(
    severity: Severity = Severity.MAJOR,
    path: str = "a.c",
    line: int = 1,
    column: int = 1,
    rule_id: str = "test-rule",
    message: str = "something is wrong",
) -> Issue:
    return Issue(
        rule_id=rule_id,
        category="test",
        severity=severity,
        message=message,
        location=Location(path=path, line=line, column=column),
    )
