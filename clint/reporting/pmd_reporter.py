# PMD-style XML report for build tools that ingest PMD output (e.g. CI warning plugins).

from __future__ import annotations

from itertools import groupby
from typing import Sequence
from xml.sax.saxutils import escape, quoteattr

from clint.findings.models import Issue, IssueSummary, Severity
from clint.metadata import TOOL_NAME, TOOL_VERSION
from clint.reporting.base import Reporter, sorted_issues

PRIORITY = {
    Severity.CRITICAL: 1,
    Severity.MAJOR: 2,
    Severity.MINOR: 3,
    Severity.COSMETIC: 4,
}


def _violation(issue: Issue) -> str:
    loc = issue.location
    attrs = {
        "begincolumn": loc.column,
        "endcolumn": loc.end_column or loc.column,
        "beginline": loc.line,
        "endline": loc.end_line or loc.line,
        "priority": PRIORITY[issue.severity],
        "rule": issue.rule_id,
        "ruleset": issue.category,
    }
    rendered = " ".join(f"{key}={quoteattr(str(value))}" for key, value in attrs.items())
    return f"<violation {rendered}>{escape(issue.message)}</violation>"


class PMDReporter(Reporter):
    def header(self) -> str:
        return (
            '<?xml version="1.0" encoding="UTF-8"?>'
            f"{self.separator}<pmd version={quoteattr(f'{TOOL_NAME}-{TOOL_VERSION}')}>"
        )

    def handle_summary(self, number_of_total_files: int, issue_summary: IssueSummary) -> str:
        return ""

    def handle_issues(self, issues: Sequence[Issue]) -> str:
        blocks = []
        for path, file_issues in groupby(sorted_issues(issues), key=lambda i: i.location.path):
            lines = [f"<file name={quoteattr(path)}>"]
            lines.extend(_violation(issue) for issue in file_issues)
            lines.append("</file>")
            blocks.append(self.separator.join(lines))
        return self.separator.join(blocks)

    def footer(self) -> str:
        return "</pmd>"
